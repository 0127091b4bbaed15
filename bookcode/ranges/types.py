"""Range tables: Range, RangeGroup and the fixed Musicland (ISMN) table.

A RangeGroup holds the allocation rules published for one prefix
("978", "978-5", ...). Each Range maps a 7-digit lookup point range to the
length of the element that starts there; length 0 marks a band that is
not allocated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from bookcode.core.result import Err, Ok


class IllegalRangeError(TypeError):
    """Range bounds are negative or reversed, or its length is negative."""


def _check_range(start: int, end: int, length: int) -> str | None:
    if start < 0 or end < 0 or start > end:
        return f"Invalid range start:{start}, end:{end}"
    if length < 0:
        return f"Invalid range length:{length}"
    return None


@final
@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive [start, end] band of lookup points with element length."""

    start: int
    end: int
    length: int

    def __post_init__(self) -> None:
        problem = _check_range(self.start, self.end, self.length)
        if problem is not None:
            raise IllegalRangeError(problem)

    @staticmethod
    def create(start: int, end: int, length: int) -> Ok[Range] | Err[str]:
        """Validate bounds and return Result instead of raising."""
        problem = _check_range(start, end, length)
        if problem is not None:
            return Err(problem)
        return Ok(Range(start=start, end=end, length=length))

    def contains(self, point: int) -> bool:
        return self.start <= point <= self.end


@final
@dataclass(frozen=True, slots=True)
class RangeGroup:
    """Agency name and its ordered allocation rules.

    Ranges are kept in source order; they are assumed non-overlapping and
    are neither re-sorted nor checked for full coverage.
    """

    name: str
    ranges: tuple[Range, ...]

    def find_range(self, point: int) -> Range | None:
        """First range containing point, or None."""
        for r in self.ranges:
            if r.contains(point):
                return r
        return None


# ---------------------------------------------------------------------------
# Musicland (ISMN): constant of the scheme, not supplied by providers
# ---------------------------------------------------------------------------

MUSICLAND_PREFIX: str = "979-0"
MUSICLAND_EAN_PREFIX: str = "9790"

MUSICLAND: RangeGroup = RangeGroup(
    name="Musicland",
    ranges=(
        Range(0, 999999, 3),         # 000 - 099
        Range(1000000, 3999999, 4),  # 1000 - 3999
        Range(4000000, 6999999, 5),  # 40000 - 69999
        Range(7000000, 8999999, 6),  # 700000 - 899999
        Range(9000000, 9999999, 7),  # 9000000 - 9999999
    ),
)
