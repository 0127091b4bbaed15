"""RangeMessage XML (isbn-international.org) to a range mapping.

The message lists GS1 prefix rules under <EAN.UCC> nodes and registrant
rules under <Group> nodes, each with <Prefix>, <Agency> and
<Rule><Range>0000000-5999999</Range><Length>1</Length></Rule> entries.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import UTC
from typing import IO, final

from dateutil import parser as date_parser

from bookcode.core.errors import RangeServiceError
from bookcode.core.result import Err, Ok
from bookcode.core.types import UtcDatetime
from bookcode.ranges.codec import RangeMap
from bookcode.ranges.types import Range, RangeGroup

logger = logging.getLogger(__name__)

_GROUP_NODES = ("EAN.UCC", "Group")


@final
@dataclass(frozen=True, slots=True)
class RangeMessage:
    """Decoded range message: header fields plus the range mapping."""

    source: str | None
    serial_number: str | None
    message_date: UtcDatetime | None
    ranges: RangeMap


def _read_error(detail: str) -> Err[RangeServiceError]:
    return Err(RangeServiceError(
        message=detail,
        code="RANGES_READ",
        timestamp=UtcDatetime.now(),
        source="ranges.reader.read_range_message",
        operation="read",
    ))


def _text(node: ET.Element, tag: str) -> str | None:
    value = node.findtext(tag)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_message_date(raw: str | None) -> UtcDatetime | None:
    """MessageDate is RFC 2822-ish ("Sat, 10 Feb 2024 16:34:21 GMT")."""
    if raw is None:
        return None
    try:
        parsed = date_parser.parse(raw)
    except (ValueError, OverflowError):
        logger.warning("Unparseable MessageDate %r in range message", raw)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return UtcDatetime(value=parsed.astimezone(UTC))


def _read_rule(rule: ET.Element, prefix: str) -> Ok[Range] | Err[RangeServiceError]:
    range_str = _text(rule, "Range")
    length = _text(rule, "Length")
    if range_str is None or length is None:
        return _read_error(f"Can't parse incomplete rule at prefix '{prefix}'")
    parts = range_str.split("-")
    malformed = f"Malformed range '{range_str}' at prefix '{prefix}'"
    if len(parts) != 2:
        return _read_error(malformed)
    try:
        start, end, size = int(parts[0]), int(parts[1]), int(length)
    except ValueError:
        return _read_error(malformed)
    match Range.create(start, end, size):
        case Err(_):
            return _read_error(malformed)
        case Ok(r):
            return Ok(r)


def _read_group(node: ET.Element) -> Ok[tuple[str, RangeGroup]] | Err[RangeServiceError]:
    prefix = _text(node, "Prefix")
    name = _text(node, "Agency")
    rules = node.findall("./Rules/Rule")
    if prefix is None or name is None or not rules:
        return _read_error(f"Can't parse incomplete group at prefix '{prefix}'")
    ranges: list[Range] = []
    for rule in rules:
        match _read_rule(rule, prefix):
            case Err() as e:
                return e
            case Ok(r):
                ranges.append(r)
    return Ok((prefix, RangeGroup(name=name, ranges=tuple(ranges))))


def read_range_message(source: str | bytes | IO[bytes]) -> Ok[RangeMessage] | Err[RangeServiceError]:
    """Decode a RangeMessage document (text, bytes, or binary stream)."""
    try:
        if isinstance(source, (str, bytes)):
            root = ET.fromstring(source)
        else:
            root = ET.parse(source).getroot()
    except ET.ParseError as e:
        return _read_error(f"Range message is not well-formed XML: {e}")

    mapping: RangeMap = {}
    for node in root.iter():
        if node.tag not in _GROUP_NODES:
            continue
        match _read_group(node):
            case Err() as e:
                return e
            case Ok((prefix, group)):
                mapping[prefix] = group

    return Ok(RangeMessage(
        source=_text(root, "MessageSource"),
        serial_number=_text(root, "MessageSerialNumber"),
        message_date=_parse_message_date(_text(root, "MessageDate")),
        ranges=mapping,
    ))
