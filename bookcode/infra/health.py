"""Health reporting for long-running range providers.

A service embedding OnlineRangeProvider can wire readiness_check() to its
readiness probe: not ready until a range table is available.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, final, runtime_checkable

from bookcode.core.errors import RangeServiceError
from bookcode.core.result import Err, Ok
from bookcode.core.types import UtcDatetime


@final
@dataclass(frozen=True, slots=True)
class HealthStatus:
    """Status of a single component."""

    healthy: bool
    component: str
    message: str
    checked_at: UtcDatetime


@final
@dataclass(frozen=True, slots=True)
class SystemHealth:
    """Aggregate status of all checked components."""

    overall_healthy: bool
    checks: tuple[HealthStatus, ...]
    checked_at: UtcDatetime


@runtime_checkable
class HealthCheckable(Protocol):
    def health_check(self) -> Ok[HealthStatus] | Err[RangeServiceError]: ...


def readiness_check(components: tuple[HealthCheckable, ...]) -> SystemHealth:
    """Check every component; a failed check counts as unhealthy."""
    checks: list[HealthStatus] = []
    for component in components:
        match component.health_check():
            case Ok(status):
                checks.append(status)
            case Err(error):
                checks.append(HealthStatus(
                    healthy=False, component=error.source,
                    message=f"Health check failed: {error.message}",
                    checked_at=UtcDatetime.now(),
                ))
    return SystemHealth(
        overall_healthy=all(c.healthy for c in checks),
        checks=tuple(checks),
        checked_at=UtcDatetime.now(),
    )
