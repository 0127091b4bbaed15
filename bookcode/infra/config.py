"""Configuration for the range service: download endpoints and cache.

No HTTP client is imported here. Pure configuration data.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from typing import final

from dateutil.relativedelta import relativedelta

# ---------------------------------------------------------------------------
# isbn-international.org endpoints
# ---------------------------------------------------------------------------

RANGE_INFO_URL: str = "https://www.isbn-international.org/bl_proxy/GetRangeInformations"
RANGE_DOWNLOAD_URL: str = "https://www.isbn-international.org/download_range/{value}/{filename}"
RANGE_INFO_FORM: str = "format=1&language=en&translatedTexts=Printed%3BLast%20Change"

CACHE_PATH_ENV: str = "BOOKCODE_RANGES_CACHE"
CACHE_FILE_NAME: str = "bookcode-isbn-ranges-cache.json"


def default_cache_path() -> str:
    """$BOOKCODE_RANGES_CACHE, else a file in the system temp directory."""
    return os.environ.get(CACHE_PATH_ENV) or os.path.join(tempfile.gettempdir(), CACHE_FILE_NAME)


@final
@dataclass(frozen=True, slots=True)
class DownloadConfig:
    """Range download settings.

    The endpoints emulate the html form on isbn-international.org; there
    is no published API contract behind them. The timeout is relaxed and
    applies to every blocking socket operation (connect and each read).
    """

    info_url: str = RANGE_INFO_URL
    download_url: str = RANGE_DOWNLOAD_URL
    form_data: str = RANGE_INFO_FORM
    timeout_s: float = 60.0
    user_agent: str = "bookcode-ranges/1.0"


@final
@dataclass(frozen=True, slots=True)
class CacheConfig:
    """File cache settings. ttl=None means the cache never expires."""

    ttl: relativedelta | None = field(default_factory=lambda: relativedelta(days=30))
    file_path: str = field(default_factory=default_cache_path)
