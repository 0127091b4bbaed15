"""Caches backing OnlineRangeProvider.

A cache never deletes an expired table: the provider keeps serving it
while a fresh one downloads, and replaces it with save(). save() swaps
the in-memory reference in one assignment, so concurrent readers see
either the old or the new mapping, never a mix.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, final, runtime_checkable

from dateutil.relativedelta import relativedelta

from bookcode.core.errors import RangeServiceError
from bookcode.core.result import Err, Ok
from bookcode.core.types import UtcDatetime
from bookcode.infra.config import CacheConfig
from bookcode.ranges.codec import RangeMap, dump_ranges, load_ranges

logger = logging.getLogger(__name__)

type Clock = Callable[[], UtcDatetime]


def _cache_error(operation: str, detail: str) -> RangeServiceError:
    return RangeServiceError(
        message=detail,
        code="RANGES_CACHE",
        timestamp=UtcDatetime.now(),
        source=f"ranges.cache.{operation}",
        operation=operation,
    )


def _seconds_left(
    saved_at: UtcDatetime | None, ttl: relativedelta | None, clock: Clock,
) -> float | None:
    """Seconds until expiry; None when the table never expires."""
    if ttl is None:
        return None
    if saved_at is None:
        return 0.0
    expires = saved_at.value + ttl
    return max(0.0, (expires - clock().value).total_seconds())


@runtime_checkable
class RangeCache(Protocol):
    """Storage for a downloaded range mapping.

    Invariants:
      - exists is False until a table was saved (or found on disk).
      - load() returns Err when called while exists is False.
      - valid_for is None for tables that never expire.
    """

    @property
    def exists(self) -> bool: ...

    @property
    def valid_for(self) -> float | None: ...

    def load(self) -> Ok[RangeMap] | Err[RangeServiceError]: ...

    def save(self, mapping: RangeMap) -> Ok[None] | Err[RangeServiceError]: ...


@final
class InMemoryCache:
    """Process memory only. Does not expire by default.

    Every process restart downloads the ranges again; suits short-lived
    batch jobs that need the most recent allocations.
    """

    def __init__(self, ttl: relativedelta | None = None, clock: Clock = UtcDatetime.now) -> None:
        self._ttl = ttl
        self._clock = clock
        self._map: RangeMap | None = None
        self._saved_at: UtcDatetime | None = None

    @property
    def exists(self) -> bool:
        return self._map is not None

    @property
    def valid_for(self) -> float | None:
        return _seconds_left(self._saved_at, self._ttl, self._clock)

    def load(self) -> Ok[RangeMap] | Err[RangeServiceError]:
        current = self._map
        if current is None:
            return Err(_cache_error("load", "Trying to load non existing cache"))
        return Ok(current)

    def save(self, mapping: RangeMap) -> Ok[None] | Err[RangeServiceError]:
        self._saved_at = self._clock()
        self._map = dict(mapping)
        return Ok(None)


@final
class FileCache:
    """JSON file cache, 30-day TTL by default (see CacheConfig).

    The file is read once; later loads are served from memory. The file
    modification time counts as the save time.
    """

    def __init__(self, config: CacheConfig | None = None, clock: Clock = UtcDatetime.now) -> None:
        self._config = config if config is not None else CacheConfig()
        self._path = Path(self._config.file_path)
        self._clock = clock
        self._map: RangeMap | None = None
        self._saved_at: UtcDatetime | None = None
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def exists(self) -> bool:
        return self._map is not None or self._path.exists()

    @property
    def valid_for(self) -> float | None:
        saved_at = self._saved_at
        if saved_at is None and self._path.exists():
            saved_at = UtcDatetime.from_timestamp(self._path.stat().st_mtime)
        return _seconds_left(saved_at, self._config.ttl, self._clock)

    def load(self) -> Ok[RangeMap] | Err[RangeServiceError]:
        current = self._map
        if current is not None:
            return Ok(current)
        if not self._path.exists():
            return Err(_cache_error("load", "Trying to load non existing cache"))
        try:
            text = self._path.read_text("utf-8")
            mtime = self._path.stat().st_mtime
        except OSError as e:
            return Err(_cache_error("load", f"Failed to read cache file {self._path}: {e}"))
        match load_ranges(text):
            case Err(detail):
                return Err(_cache_error("load", f"Corrupt cache file {self._path}: {detail}"))
            case Ok(mapping):
                self._saved_at = UtcDatetime.from_timestamp(mtime)
                self._map = mapping
                logger.info("Loaded %d range groups from %s", len(mapping), self._path)
                return Ok(mapping)

    def save(self, mapping: RangeMap) -> Ok[None] | Err[RangeServiceError]:
        snapshot = dict(mapping)
        tmp = self._path.with_name(f"{self._path.name}.tmp")
        with self._write_lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_text(dump_ranges(snapshot), "utf-8")
                os.replace(tmp, self._path)
            except OSError as e:
                return Err(_cache_error("save", f"Failed to write cache file {self._path}: {e}"))
            self._saved_at = self._clock()
            self._map = snapshot
        logger.info("Saved %d range groups to %s", len(snapshot), self._path)
        return Ok(None)
