"""Tests for bookcode.ranges.reader: RangeMessage XML decoding."""

from __future__ import annotations

import io
from datetime import UTC, datetime

import pytest

from bookcode.core.result import Err, Ok, unwrap
from bookcode.ranges.reader import read_range_message
from bookcode.ranges.types import Range

MESSAGE = """<?xml version="1.0" encoding="utf-8"?>
<ISBNRangeMessage>
  <MessageSource>International ISBN Agency</MessageSource>
  <MessageSerialNumber>8e5b4c47-a0dc-4bb6-8d91-6a8a0f7c3b1e</MessageSerialNumber>
  <MessageDate>Sat, 10 Feb 2024 16:34:21 GMT</MessageDate>
  <EAN.UCCPrefixes>
    <EAN.UCC>
      <Prefix>978</Prefix>
      <Agency>International ISBN Agency</Agency>
      <Rules>
        <Rule><Range>0000000-5999999</Range><Length>1</Length></Rule>
        <Rule><Range>6000000-6499999</Range><Length>3</Length></Rule>
      </Rules>
    </EAN.UCC>
  </EAN.UCCPrefixes>
  <RegistrationGroups>
    <Group>
      <Prefix>978-5</Prefix>
      <Agency>former U.S.S.R</Agency>
      <Rules>
        <Rule><Range>0000000-0049999</Range><Length>5</Length></Rule>
        <Rule><Range>0100000-1999999</Range><Length>2</Length></Rule>
      </Rules>
    </Group>
  </RegistrationGroups>
</ISBNRangeMessage>
"""


def _group(prefix: str, rules: str, agency: str = "<Agency>Agency</Agency>") -> str:
    return (
        "<ISBNRangeMessage><RegistrationGroups><Group>"
        f"<Prefix>{prefix}</Prefix>{agency}<Rules>{rules}</Rules>"
        "</Group></RegistrationGroups></ISBNRangeMessage>"
    )


def _error_message(source: str) -> str:
    match read_range_message(source):
        case Err(e):
            assert e.code == "RANGES_READ"
            return e.message
        case Ok(_):
            pytest.fail("Expected read error")


class TestReadRangeMessage:
    def test_reads_both_node_kinds(self) -> None:
        message = unwrap(read_range_message(MESSAGE))
        assert set(message.ranges) == {"978", "978-5"}
        assert message.ranges["978"].ranges == (Range(0, 5999999, 1), Range(6000000, 6499999, 3))
        assert message.ranges["978-5"].name == "former U.S.S.R"
        assert message.ranges["978-5"].ranges[1] == Range(100000, 1999999, 2)

    def test_header_fields(self) -> None:
        message = unwrap(read_range_message(MESSAGE))
        assert message.source == "International ISBN Agency"
        assert message.serial_number == "8e5b4c47-a0dc-4bb6-8d91-6a8a0f7c3b1e"
        assert message.message_date is not None
        assert message.message_date.value == datetime(2024, 2, 10, 16, 34, 21, tzinfo=UTC)

    def test_reads_binary_stream(self) -> None:
        stream = io.BytesIO(MESSAGE.encode("utf-8"))
        assert unwrap(read_range_message(stream)).ranges.keys() == {"978", "978-5"}

    def test_unparseable_date_is_dropped(self) -> None:
        message = unwrap(read_range_message(
            MESSAGE.replace("Sat, 10 Feb 2024 16:34:21 GMT", "sometime last week")
        ))
        assert message.message_date is None

    def test_group_without_rules(self) -> None:
        assert _error_message(_group("978-5", "")) == "Can't parse incomplete group at prefix '978-5'"

    def test_group_without_agency(self) -> None:
        rules = "<Rule><Range>0000000-9999999</Range><Length>1</Length></Rule>"
        assert _error_message(_group("978-5", rules, agency="")) == (
            "Can't parse incomplete group at prefix '978-5'"
        )

    def test_incomplete_rule(self) -> None:
        assert _error_message(_group("978-5", "<Rule><Range>0-1</Range></Rule>")) == (
            "Can't parse incomplete rule at prefix '978-5'"
        )

    @pytest.mark.parametrize("range_str", ["0000000", "a-b", "5-1", "0-1-2"])
    def test_malformed_range(self, range_str: str) -> None:
        rules = f"<Rule><Range>{range_str}</Range><Length>1</Length></Rule>"
        assert _error_message(_group("978-5", rules)) == (
            f"Malformed range '{range_str}' at prefix '978-5'"
        )

    def test_not_xml(self) -> None:
        assert _error_message("<ISBNRangeMessage>").startswith("Range message is not well-formed XML")
