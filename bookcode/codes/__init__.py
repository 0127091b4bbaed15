"""bookcode.codes: book number record, conversions and the parser."""

from bookcode.codes.parser import Parser as Parser
from bookcode.codes.types import BookNumber as BookNumber
from bookcode.codes.types import CodeType as CodeType
from bookcode.codes.types import Metadata as Metadata
from bookcode.codes.types import Subset as Subset
