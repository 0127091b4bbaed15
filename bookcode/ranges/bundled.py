"""Provider over the range table bundled with the package.

The table is a snapshot of the ISBN International range message shipped
as bookcode/data/isbn-ranges.json. It needs no network, at the expense of
possibly outdated ranges; use OnlineRangeProvider when recent allocations
matter.
"""

from __future__ import annotations

import logging
from importlib import resources
from typing import final

from bookcode.core.result import Err, Ok
from bookcode.ranges.codec import RangeMap, load_ranges
from bookcode.ranges.types import RangeGroup

logger = logging.getLogger(__name__)

BUNDLED_RESOURCE = "isbn-ranges.json"


def load_bundled() -> RangeMap:
    """Read the bundled table. A broken package resource is a bug: raises."""
    text = resources.files("bookcode.data").joinpath(BUNDLED_RESOURCE).read_text("utf-8")
    match load_ranges(text):
        case Err(e):
            raise RuntimeError(f"Bundled ISBN ranges are corrupt: {e}")
        case Ok(mapping):
            logger.debug("Loaded %d bundled range groups", len(mapping))
            return mapping


@final
class BundledRangeProvider:
    """Loads the bundled table eagerly, or on first lookup."""

    def __init__(self, eager_load: bool = True) -> None:
        self._map: RangeMap | None = load_bundled() if eager_load else None

    def get_ranges(self, prefix: str) -> RangeGroup | None:
        if self._map is None:
            self._map = load_bundled()
        return self._map.get(prefix)
