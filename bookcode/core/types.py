"""Core types shared by the codes and ranges packages: UtcDatetime."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import final

from bookcode.core.result import Err, Ok


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """Timezone-aware UTC datetime. Naive datetimes are rejected."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")

    @staticmethod
    def parse(raw: datetime) -> Ok[UtcDatetime] | Err[str]:
        """Parse a datetime, rejecting naive (no tzinfo) datetimes."""
        if raw.tzinfo is None:
            return Err("UtcDatetime requires timezone-aware datetime, got naive")
        return Ok(UtcDatetime(value=raw.astimezone(UTC)))

    @staticmethod
    def from_timestamp(seconds: float) -> UtcDatetime:
        """UTC time from a POSIX timestamp (file mtimes, cache stamps)."""
        return UtcDatetime(value=datetime.fromtimestamp(seconds, tz=UTC))

    @staticmethod
    def now() -> UtcDatetime:
        """Current UTC time."""
        return UtcDatetime(value=datetime.now(tz=UTC))
