"""In-memory range provider.

Serves a fixed mapping. Used by tests and by callers that load or build
their own tables.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import final

from bookcode.ranges.types import RangeGroup


@final
class InMemoryRangeProvider:
    """Provider over a mapping copied at construction."""

    def __init__(self, mapping: Mapping[str, RangeGroup]) -> None:
        self._map: dict[str, RangeGroup] = dict(mapping)

    def get_ranges(self, prefix: str) -> RangeGroup | None:
        return self._map.get(prefix)
