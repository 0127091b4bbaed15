"""Download the current range message from isbn-international.org.

Two requests: a form POST that returns the location of the latest
RangeMessage export, then a GET of that XML. This emulates the html form
on the agency site; there are no documented rate limits and no guarantee
that the endpoints stay unchanged, so never rely on it as the only source
of ranges.
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.request
from typing import Protocol, final, runtime_checkable
from urllib.parse import quote

import certifi

from bookcode.core.errors import RangeServiceError
from bookcode.core.result import Err, Ok
from bookcode.core.types import UtcDatetime
from bookcode.infra.config import DownloadConfig
from bookcode.ranges.reader import RangeMessage, read_range_message

logger = logging.getLogger(__name__)


class HttpStatusError(OSError):
    """Non-200 response from the range endpoints."""


@runtime_checkable
class HttpClient(Protocol):
    """Transport used by DownloadClient.

    Implementations raise OSError (or a subclass) on network failures and
    on non-200 responses; DownloadClient turns those into error values.
    """

    def post(self, url: str, form_data: str) -> bytes: ...

    def get(self, url: str) -> bytes: ...


@final
class UrllibHttpClient:
    """urllib transport verifying TLS against the certifi CA bundle."""

    def __init__(self, config: DownloadConfig | None = None) -> None:
        self._config = config if config is not None else DownloadConfig()
        self._ssl_ctx = ssl.create_default_context(cafile=certifi.where())

    def _open(self, req: urllib.request.Request) -> bytes:
        with urllib.request.urlopen(  # noqa: S310
            req, timeout=self._config.timeout_s, context=self._ssl_ctx,
        ) as resp:
            if resp.status != 200:
                raise HttpStatusError(f"Http response code {resp.status}")
            return resp.read()

    def post(self, url: str, form_data: str) -> bytes:
        body = form_data.encode("utf-8")
        req = urllib.request.Request(
            url,
            data=body,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": self._config.user_agent,
            },
            method="POST",
        )
        return self._open(req)

    def get(self, url: str) -> bytes:
        req = urllib.request.Request(
            url, headers={"User-Agent": self._config.user_agent}, method="GET",
        )
        return self._open(req)


def _download_error(detail: str) -> Err[RangeServiceError]:
    return Err(RangeServiceError(
        message=detail,
        code="RANGES_DOWNLOAD",
        timestamp=UtcDatetime.now(),
        source="ranges.download.DownloadClient.download",
        operation="download",
    ))


def _export_location(payload: bytes) -> Ok[tuple[str, str]] | Err[RangeServiceError]:
    """(value, filename) of the latest export from the info response."""
    try:
        info = json.loads(payload)
    except ValueError as e:
        return _download_error(f"GetRangeInformations returned invalid JSON: {e}")
    if not isinstance(info, dict):
        return _download_error("GetRangeInformations returned an unexpected document")
    status = info.get("status")
    result = info.get("result")
    messages = info.get("messages") or []
    if status != "success" or not isinstance(result, dict):
        return _download_error(
            f"GetRangeInformations was unsuccessful (status={status}; "
            f"message={', '.join(str(m) for m in messages)})"
        )
    value, filename = result.get("value"), result.get("filename")
    if not isinstance(value, str) or not isinstance(filename, str):
        return _download_error("GetRangeInformations result lacks value or filename")
    return Ok((value, filename))


@final
class DownloadClient:
    """Fetches and decodes the latest RangeMessage."""

    def __init__(
        self, http: HttpClient | None = None, config: DownloadConfig | None = None,
    ) -> None:
        self._config = config if config is not None else DownloadConfig()
        self._http = http if http is not None else UrllibHttpClient(self._config)

    def download(self) -> Ok[RangeMessage] | Err[RangeServiceError]:
        cfg = self._config
        logger.info("Requesting range information from %s", cfg.info_url)
        try:
            info = self._http.post(cfg.info_url, cfg.form_data)
        except OSError as e:
            return _download_error(
                f"Error occurred while trying to do HTTP request GetRangeInformations: {e}"
            )

        match _export_location(info):
            case Err() as err:
                return err
            case Ok((value, filename)):
                url = cfg.download_url.format(value=quote(value), filename=quote(filename))

        logger.info("Downloading range message from %s", url)
        try:
            xml = self._http.get(url)
        except OSError as e:
            return _download_error(
                f"Error occurred while trying to do HTTP xml download request: {e}"
            )
        return read_range_message(xml)
