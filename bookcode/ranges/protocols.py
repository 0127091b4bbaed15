"""Range lookup protocol: the only range interface the parser depends on.

Keys are either a bare GS1 element ("978") for registration group rules,
or "<gs1>-<group>" ("978-1") for registrant rules. A provider answers
synchronously; how it obtains, caches or refreshes its tables is its own
business.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bookcode.ranges.types import RangeGroup


@runtime_checkable
class RangeProvider(Protocol):
    """Source of range tables.

    Invariants:
      - get_ranges() returns None for an unknown prefix, never raises.
      - a returned RangeGroup is complete and usable immediately.
    """

    def get_ranges(self, prefix: str) -> RangeGroup | None: ...


def gs1_ranges(provider: RangeProvider, gs1: int) -> RangeGroup | None:
    """Registration group rules for a GS1 element (e.g. 978)."""
    return provider.get_ranges(str(gs1))


def group_ranges(provider: RangeProvider, gs1: int, group: int) -> RangeGroup | None:
    """Registrant rules for a registration group (e.g. 978, 1 -> "978-1")."""
    return provider.get_ranges(f"{gs1}-{group}")
