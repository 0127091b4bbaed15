"""bookcode.ranges: range tables, the provider protocol and its adapters."""

from bookcode.ranges.bundled import BundledRangeProvider as BundledRangeProvider
from bookcode.ranges.cache import FileCache as FileCache
from bookcode.ranges.cache import InMemoryCache as InMemoryCache
from bookcode.ranges.cache import RangeCache as RangeCache
from bookcode.ranges.codec import RangeMap as RangeMap
from bookcode.ranges.codec import dump_ranges as dump_ranges
from bookcode.ranges.codec import load_ranges as load_ranges
from bookcode.ranges.download import DownloadClient as DownloadClient
from bookcode.ranges.download import HttpClient as HttpClient
from bookcode.ranges.memory_adapter import InMemoryRangeProvider as InMemoryRangeProvider
from bookcode.ranges.online import OnlineRangeProvider as OnlineRangeProvider
from bookcode.ranges.protocols import RangeProvider as RangeProvider
from bookcode.ranges.reader import RangeMessage as RangeMessage
from bookcode.ranges.reader import read_range_message as read_range_message
from bookcode.ranges.types import MUSICLAND as MUSICLAND
from bookcode.ranges.types import IllegalRangeError as IllegalRangeError
from bookcode.ranges.types import Range as Range
from bookcode.ranges.types import RangeGroup as RangeGroup
