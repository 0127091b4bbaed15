"""Range provider that keeps itself current from isbn-international.org.

On start the provider serves a cached table if one exists and schedules a
refresh for when it expires; otherwise it downloads in the background.
Lookups made before any table is available block until the first download
settles.

Threading:
  - downloads run in daemon threads (threading.Timer for scheduled ones),
    so a provider never keeps the interpreter alive.
  - the served table is replaced by a single reference assignment; a
    lookup sees either the previous or the new table.
"""

from __future__ import annotations

import logging
import threading
from typing import final

from bookcode.core.errors import RangeServiceError
from bookcode.core.result import Err, Ok
from bookcode.core.types import UtcDatetime
from bookcode.infra.health import HealthStatus
from bookcode.ranges.cache import FileCache, RangeCache
from bookcode.ranges.codec import RangeMap
from bookcode.ranges.download import DownloadClient
from bookcode.ranges.types import RangeGroup

logger = logging.getLogger(__name__)

RETRY_AFTER_S: float = 3600.0


def _online_error(operation: str, detail: str) -> RangeServiceError:
    return RangeServiceError(
        message=detail,
        code="RANGES_UNAVAILABLE",
        timestamp=UtcDatetime.now(),
        source=f"ranges.online.OnlineRangeProvider.{operation}",
        operation=operation,
    )


@final
class OnlineRangeProvider:
    """Downloaded ranges, persisted through a RangeCache.

    Defaults: FileCache (30-day TTL) and the urllib DownloadClient. A
    failed refresh keeps the current table and retries after
    retry_after_s seconds.
    """

    def __init__(
        self,
        cache: RangeCache | None = None,
        client: DownloadClient | None = None,
        retry_after_s: float = RETRY_AFTER_S,
        start: bool = True,
    ) -> None:
        self._cache: RangeCache = cache if cache is not None else FileCache()
        self._client = client if client is not None else DownloadClient()
        self._retry_after_s = retry_after_s
        self._map: RangeMap | None = None
        self._last_error: RangeServiceError | None = None
        self._settled = threading.Event()
        self._timer_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._closed = False
        if start:
            self.start()

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def start(self) -> None:
        """Serve the cached table, or begin the initial download."""
        if self._cache.exists:
            match self._cache.load():
                case Ok(mapping):
                    self._map = mapping
                    self._settled.set()
                    self._schedule(self._cache.valid_for)
                    return
                case Err(e):
                    logger.warning("Ignoring unusable range cache: %s", e.message)
        logger.info("No range cache available, downloading in background")
        thread = threading.Thread(target=self.refresh, name="bookcode-ranges-download", daemon=True)
        thread.start()

    def close(self) -> None:
        """Cancel any scheduled refresh. The current table stays usable."""
        with self._timer_lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self, delay: float | None) -> None:
        if delay is None:
            logger.debug("Range table never expires, no refresh scheduled")
            return
        with self._timer_lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(delay, self.refresh)
            timer.name = "bookcode-ranges-refresh"
            timer.daemon = True
            self._timer = timer
            timer.start()
        logger.info("Range refresh scheduled in %.0f seconds", delay)

    # -----------------------------------------------------------------------
    # Refresh
    # -----------------------------------------------------------------------

    def refresh(self) -> Ok[None] | Err[RangeServiceError]:
        """Download now, then swap in and persist the new table."""
        try:
            return self._download_and_swap()
        finally:
            # Waiters wake up once the first attempt settles, either way
            self._settled.set()

    def _download_and_swap(self) -> Ok[None] | Err[RangeServiceError]:
        match self._client.download():
            case Err(error):
                self._last_error = error
                logger.error("Range download failed: %s", error.message)
                if self._map is not None:
                    self._schedule(self._retry_after_s)
                return Err(error)
            case Ok(message):
                mapping = message.ranges

        match self._cache.save(mapping):
            case Err(error):
                logger.warning("Range table not persisted: %s", error.message)
            case Ok():
                pass
        self._map = mapping
        self._last_error = None
        logger.info(
            "Range table refreshed: %d groups (message date %s)",
            len(mapping),
            message.message_date.value.isoformat() if message.message_date else "unknown",
        )
        self._schedule(self._cache.valid_for)
        return Ok(None)

    def wait(self, timeout: float | None = None) -> Ok[None] | Err[RangeServiceError]:
        """Block until a table is available or the initial download failed."""
        if not self._settled.wait(timeout):
            return Err(_online_error("wait", "Timed out waiting for the initial range download"))
        if self._map is None:
            detail = "OnlineRangeProvider is unusable - cache is empty and download has failed"
            if self._last_error is not None:
                detail = f"{detail}: {self._last_error.message}"
            return Err(_online_error("wait", detail))
        return Ok(None)

    # -----------------------------------------------------------------------
    # RangeProvider
    # -----------------------------------------------------------------------

    def get_ranges(self, prefix: str) -> RangeGroup | None:
        mapping = self._map
        if mapping is None:
            match self.wait():
                case Err(error):
                    logger.error("Range lookup for %r failed: %s", prefix, error.message)
                    return None
                case Ok():
                    mapping = self._map
        return mapping.get(prefix) if mapping is not None else None

    def health_check(self) -> Ok[HealthStatus] | Err[RangeServiceError]:
        mapping = self._map
        if mapping is None:
            message = "no range table loaded"
            if self._last_error is not None:
                message = f"{message}: {self._last_error.message}"
            healthy = False
        else:
            valid_for = self._cache.valid_for
            if valid_for is not None and valid_for <= 0:
                message = f"{len(mapping)} range groups, expired, refresh pending"
            else:
                message = f"{len(mapping)} range groups"
            healthy = True
        return Ok(HealthStatus(
            healthy=healthy,
            component="ranges.online",
            message=message,
            checked_at=UtcDatetime.now(),
        ))
