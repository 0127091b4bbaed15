"""Hypothesis profiles and pytest fixtures for bookcode.

MOCK_RANGES is the small table most parser tests run against: one-digit
978 groups plus the three-digit 600 band, English language registrants
around 55404, the former U.S.S.R. table with an unallocated low band and
Iran, whose six-digit residuals are padded before the registrant lookup.
"""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from bookcode.codes.parser import Parser
from bookcode.facade import ISBN, default_isbn
from bookcode.ranges.memory_adapter import InMemoryRangeProvider
from bookcode.ranges.types import Range, RangeGroup

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# RANGE FIXTURES
# ===================================================================

MOCK_RANGES: dict[str, RangeGroup] = {
    "978": RangeGroup(
        name="International ISBN Agency",
        ranges=(Range(0, 5999999, 1), Range(6000000, 6499999, 3)),
    ),
    "978-1": RangeGroup(
        name="English language",
        ranges=(Range(5500000, 6499999, 5),),
    ),
    "978-5": RangeGroup(
        name="former U.S.S.R",
        ranges=(Range(0, 99999, 0), Range(100000, 1999999, 2)),
    ),
    "978-600": RangeGroup(
        name="Iran",
        ranges=(Range(0, 999999, 2), Range(1000000, 4999999, 3)),
    ),
}


@pytest.fixture
def mock_provider() -> InMemoryRangeProvider:
    return InMemoryRangeProvider(MOCK_RANGES)


@pytest.fixture
def parser(mock_provider: InMemoryRangeProvider) -> Parser:
    return Parser(mock_provider)


@pytest.fixture
def isbn() -> ISBN:
    """Facade over the bundled range table."""
    return default_isbn()

