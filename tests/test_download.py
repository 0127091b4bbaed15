"""Tests for bookcode.ranges.download: the two-request download flow."""

from __future__ import annotations

import json

import pytest

from bookcode.core.errors import RangeServiceError
from bookcode.core.result import Err, Ok, unwrap
from bookcode.infra.config import RANGE_INFO_FORM, RANGE_INFO_URL, DownloadConfig
from bookcode.ranges.download import DownloadClient, HttpClient, UrllibHttpClient
from bookcode.ranges.types import Range

XML = b"""<?xml version="1.0" encoding="utf-8"?>
<ISBNRangeMessage>
  <MessageDate>Sat, 10 Feb 2024 16:34:21 GMT</MessageDate>
  <EAN.UCCPrefixes><EAN.UCC>
    <Prefix>978</Prefix><Agency>International ISBN Agency</Agency>
    <Rules><Rule><Range>0000000-5999999</Range><Length>1</Length></Rule></Rules>
  </EAN.UCC></EAN.UCCPrefixes>
</ISBNRangeMessage>
"""

INFO_OK = json.dumps({
    "result": {"value": "a1b2c3", "filename": "RangeMessage.xml"},
    "status": "success",
    "messages": [],
}).encode("utf-8")


class FakeHttp:
    """Records requests and replays canned responses (or raises OSError)."""

    def __init__(self, info: bytes | OSError = INFO_OK, xml: bytes | OSError = XML) -> None:
        self.info = info
        self.xml = xml
        self.posts: list[tuple[str, str]] = []
        self.gets: list[str] = []

    def post(self, url: str, form_data: str) -> bytes:
        self.posts.append((url, form_data))
        if isinstance(self.info, OSError):
            raise self.info
        return self.info

    def get(self, url: str) -> bytes:
        self.gets.append(url)
        if isinstance(self.xml, OSError):
            raise self.xml
        return self.xml


def _error(client: DownloadClient) -> RangeServiceError:
    match client.download():
        case Err(e):
            assert e.code == "RANGES_DOWNLOAD" or e.code == "RANGES_READ"
            return e
        case Ok(_):
            pytest.fail("Expected download error")


class TestDownloadClient:
    def test_fake_is_http_client(self) -> None:
        assert isinstance(FakeHttp(), HttpClient)
        assert isinstance(UrllibHttpClient(), HttpClient)

    def test_success(self) -> None:
        http = FakeHttp()
        message = unwrap(DownloadClient(http).download())
        assert message.ranges["978"].ranges == (Range(0, 5999999, 1),)
        assert http.posts == [(RANGE_INFO_URL, RANGE_INFO_FORM)]
        assert http.gets == [
            "https://www.isbn-international.org/download_range/a1b2c3/RangeMessage.xml",
        ]

    def test_custom_endpoints(self) -> None:
        http = FakeHttp()
        config = DownloadConfig(
            info_url="https://mirror.test/info",
            download_url="https://mirror.test/{value}/{filename}",
        )
        unwrap(DownloadClient(http, config).download())
        assert http.posts[0][0] == "https://mirror.test/info"
        assert http.gets == ["https://mirror.test/a1b2c3/RangeMessage.xml"]

    def test_info_request_fails(self) -> None:
        err = _error(DownloadClient(FakeHttp(info=OSError("connection refused"))))
        assert err.message.startswith(
            "Error occurred while trying to do HTTP request GetRangeInformations"
        )
        assert err.operation == "download"

    def test_unsuccessful_status(self) -> None:
        info = json.dumps({
            "result": None, "status": "error", "messages": ["Unknown format", "Try later"],
        }).encode("utf-8")
        http = FakeHttp(info=info)
        err = _error(DownloadClient(http))
        assert err.message == (
            "GetRangeInformations was unsuccessful (status=error; message=Unknown format, Try later)"
        )
        assert http.gets == []

    def test_invalid_json(self) -> None:
        err = _error(DownloadClient(FakeHttp(info=b"<html>maintenance</html>")))
        assert "invalid JSON" in err.message

    def test_result_without_filename(self) -> None:
        info = json.dumps({"result": {"value": "a1"}, "status": "success"}).encode("utf-8")
        err = _error(DownloadClient(FakeHttp(info=info)))
        assert "lacks value or filename" in err.message

    def test_xml_request_fails(self) -> None:
        err = _error(DownloadClient(FakeHttp(xml=OSError("timed out"))))
        assert err.message.startswith(
            "Error occurred while trying to do HTTP xml download request"
        )

    def test_broken_xml(self) -> None:
        err = _error(DownloadClient(FakeHttp(xml=b"<ISBNRangeMessage>")))
        assert err.code == "RANGES_READ"
