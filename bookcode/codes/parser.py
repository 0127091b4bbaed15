"""Parser: raw code string to BookNumber.

The type is detected from the length of the input once separators are
removed; ISBN-A and ISMN are recognised by their prefixes. When enabled,
the check digit is verified before the code is segmented.

Each step consumes characters from the residual string and returns the
next _ParseState or a terminal error; steps are chained with Result.bind.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import final

from bookcode.codes.types import DEFAULT_GS1, BookNumber, CodeType, Metadata, Subset
from bookcode.core.errors import IntegrityError, ParseError, ParseErrorKind
from bookcode.core.result import Err, Ok
from bookcode.ranges.protocols import RangeProvider, group_ranges, gs1_ranges
from bookcode.ranges.types import (
    MUSICLAND,
    MUSICLAND_EAN_PREFIX,
    MUSICLAND_PREFIX,
    Range,
    RangeGroup,
)

_DOI_MARKER = "10."
_ISMN_MARKER = "M-"
_SEPARATORS = frozenset("- _/.")
_LOOKUP_WIDTH = 7
_GS1_WIDTH = 3
_MUSIC_GROUP_LENGTH = 1
_SOURCE = "codes.parser.Parser.parse"


@final
@dataclass(frozen=True, slots=True)
class _ParseState:
    """Characters not yet consumed, plus what was extracted so far."""

    residual: str
    metadata: Metadata
    gs1: int = DEFAULT_GS1
    group: int = 0
    registrant: int = 0

    @property
    def tail(self) -> str:
        # Shown after the residual in error positions: check digit or "_"
        return self.metadata.check_digit or "_"


def _is_digits(s: str) -> bool:
    return bool(s) and all("0" <= c <= "9" for c in s)


def _fail(kind: ParseErrorKind, position: str) -> Err[ParseError]:
    return Err(ParseError.of(kind, position, _SOURCE))


def _detect_separator(code: str) -> str:
    trimmed = code.strip()
    return " " if " " in trimmed and "-" not in trimmed else "-"


def _remove_separators(code: str) -> str:
    return "".join(c for c in code if c not in _SEPARATORS)


def _new_state(
    code: str,
    code_type: CodeType,
    *,
    sanitised_code: str,
    check_digit: str | None,
    separator: str | None,
    packaging_indicator: int | None = None,
) -> _ParseState:
    return _ParseState(
        residual=code,
        metadata=Metadata(
            sanitised_code=sanitised_code,
            type=code_type,
            separator=separator,
            packaging_indicator=packaging_indicator,
            check_digit=check_digit,
            group_length=0,
            registrant_length=0,
            agency_name="",
        ),
    )


# ---------------------------------------------------------------------------
# Step 1-5: type, separator and check digit
# ---------------------------------------------------------------------------


def _extract_type_and_check_digit(raw: str) -> Ok[_ParseState] | Err[ParseError]:
    code = raw.strip()
    had_doi_prefix = code.startswith(_DOI_MARKER)
    if had_doi_prefix:
        code = code.removeprefix(_DOI_MARKER)
    if code.startswith(_ISMN_MARKER):
        # The marker's hyphen still counts as a separator
        code = MUSICLAND_PREFIX + code.removeprefix(_ISMN_MARKER)

    possible_separator = _detect_separator(code)
    stripped = _remove_separators(code)
    had_separators = len(stripped) < len(code)
    code = stripped
    is_musicland = code.startswith(MUSICLAND_EAN_PREFIX)

    if len(code) in (12, 13):
        if had_doi_prefix:
            code_type = CodeType.ISBN_A
        elif is_musicland:
            code_type = CodeType.ISMN if had_separators else CodeType.MUSIC_EAN
        else:
            code_type = CodeType.ISBN_13 if had_separators else CodeType.EAN_13
        check_digit: str | None = None
        if len(code) == 13:
            code, check_digit = code[:-1], code[-1]
            if not _is_digits(check_digit):
                return _fail(
                    ParseErrorKind.UNEXPECTED_CHARACTERS,
                    f"{code}>{check_digit}< ({code_type.printed_name})",
                )
        separator: str | None = None
        if code_type is CodeType.ISBN_13:
            separator = possible_separator
        elif code_type is CodeType.ISMN:
            separator = "-"
        return Ok(_new_state(
            code, code_type,
            sanitised_code=code, check_digit=check_digit, separator=separator,
        ))

    if len(code) in (9, 10):
        code_type = CodeType.ISBN_10 if had_separators else CodeType.EAN_10
        check_digit = None
        if len(code) == 10:
            code, check_digit = code[:-1], code[-1].upper()
            if not (_is_digits(check_digit) or check_digit == "X"):
                return _fail(
                    ParseErrorKind.UNEXPECTED_CHARACTERS,
                    f"{code}>{check_digit}< ({code_type.printed_name})",
                )
        return Ok(_new_state(
            code, code_type,
            sanitised_code=code, check_digit=check_digit,
            separator=possible_separator if code_type is CodeType.ISBN_10 else None,
        ))

    if len(code) == 14:
        code_type = CodeType.GTIN_14
        if had_separators:
            return _fail(
                ParseErrorKind.UNEXPECTED_CHARACTERS,
                f">{raw}< ({code_type.printed_name})",
            )
        first = code[0]
        if not _is_digits(first) or int(first) > 8:
            return _fail(
                ParseErrorKind.UNEXPECTED_CHARACTERS,
                f">{first}<{code[1:]} ({code_type.printed_name})",
            )
        return Ok(_new_state(
            code[1:-1], code_type,
            sanitised_code=code, check_digit=code[-1], separator=None,
            packaging_indicator=int(first),
        ))

    return _fail(ParseErrorKind.WRONG_LENGTH, f">{code}<")


# ---------------------------------------------------------------------------
# Step 6: integrity
# ---------------------------------------------------------------------------


def _assert_integrity(state: _ParseState) -> Ok[_ParseState] | Err[IntegrityError]:
    return state.metadata.assert_check_digit().map(lambda _: state)


# ---------------------------------------------------------------------------
# Step 7-10: segmentation
# ---------------------------------------------------------------------------


def _extract_gs1(state: _ParseState) -> Ok[_ParseState] | Err[ParseError]:
    if state.metadata.type.is_short:
        return Ok(replace(state, gs1=DEFAULT_GS1))
    code = state.residual
    head = code[:_GS1_WIDTH]
    if not _is_digits(head):
        return _fail(
            ParseErrorKind.UNEXPECTED_CHARACTERS,
            f">{head}<{code[_GS1_WIDTH:]}{state.tail}",
        )
    return Ok(replace(state, residual=code[_GS1_WIDTH:], gs1=int(head)))


def _resolve_length(
    ranges: RangeGroup, point_digits: str, state: _ParseState,
) -> Ok[Range] | Err[ParseError]:
    code = state.residual
    position = f"...>{code[:_LOOKUP_WIDTH]}<{code[_LOOKUP_WIDTH:]}{state.tail}"
    if not _is_digits(point_digits):
        return _fail(ParseErrorKind.UNEXPECTED_CHARACTERS, position)
    found = ranges.find_range(int(point_digits))
    if found is None:
        return _fail(ParseErrorKind.NO_MATCHING_RANGE, position)
    if found.length == 0:
        return _fail(ParseErrorKind.UNRESERVED_RANGE, position)
    return Ok(found)


def _take_element(
    state: _ParseState, length: int,
) -> Ok[tuple[int, str]] | Err[ParseError]:
    code = state.residual
    element = code[:length]
    if not _is_digits(element):
        return _fail(
            ParseErrorKind.UNEXPECTED_CHARACTERS,
            f"...>{element}<{code[length:]}{state.tail}",
        )
    return Ok((int(element), code[length:]))


def _extract_group(
    provider: RangeProvider, state: _ParseState,
) -> Ok[_ParseState] | Err[ParseError]:
    if state.metadata.type.subset is Subset.MUSIC:
        length: Ok[int] | Err[ParseError] = Ok(_MUSIC_GROUP_LENGTH)
    else:
        code = state.residual
        point = code[:_LOOKUP_WIDTH]
        if not _is_digits(point):
            return _fail(
                ParseErrorKind.UNEXPECTED_CHARACTERS,
                f"...>{point}<{code[_LOOKUP_WIDTH:]}{state.tail}",
            )
        ranges = gs1_ranges(provider, state.gs1)
        if ranges is None:
            return _fail(
                ParseErrorKind.UNKNOWN_GS1_ELEMENT,
                f">{state.gs1}<{code}{state.tail}",
            )
        length = _resolve_length(ranges, point, state).map(lambda r: r.length)

    def consume(n: int) -> Ok[_ParseState] | Err[ParseError]:
        return _take_element(state, n).map(lambda taken: replace(
            state,
            residual=taken[1],
            group=taken[0],
            metadata=replace(state.metadata, group_length=n),
        ))

    return length.bind(consume)


def _extract_registrant(
    provider: RangeProvider, state: _ParseState,
) -> Ok[_ParseState] | Err[ParseError]:
    code = state.residual
    if state.metadata.type.subset is Subset.MUSIC:
        ranges: RangeGroup | None = MUSICLAND
    else:
        ranges = group_ranges(provider, state.gs1, state.group)
    if ranges is None:
        return _fail(
            ParseErrorKind.UNKNOWN_GROUP_ELEMENT,
            f">{state.gs1}-{state.group}<{code}{state.tail}",
        )
    agency = ranges.name
    # Short residuals are padded on the right, biasing to the band's low end
    point = code[:_LOOKUP_WIDTH].ljust(_LOOKUP_WIDTH, "0")

    def consume(found: Range) -> Ok[_ParseState] | Err[ParseError]:
        return _take_element(state, found.length).map(lambda taken: replace(
            state,
            residual=taken[1],
            registrant=taken[0],
            metadata=replace(
                state.metadata, registrant_length=found.length, agency_name=agency,
            ),
        ))

    return _resolve_length(ranges, point, state).bind(consume)


def _extract_publication(state: _ParseState) -> Ok[BookNumber] | Err[ParseError]:
    code = state.residual
    if not _is_digits(code):
        return _fail(ParseErrorKind.UNEXPECTED_CHARACTERS, f"...>{code}<{state.tail}")
    return Ok(BookNumber(
        gs1=state.gs1,
        group=state.group,
        registrant=state.registrant,
        publication=int(code),
        metadata=state.metadata,
    ))


@final
class Parser:
    """Decomposes code strings using the rules of a RangeProvider.

    Supported inputs:
      ISBN-13 / EAN-13, with or without check digit: 978-92-95055-12-4, 9789295055124
      ISBN-10 / EAN-10, with or without check digit: 92-95055-12-8, 929505512
      ISMN / Music EAN: 979-0-2600-0043-8, M-2600-0043-8, 9790260000438
      ISBN-A (DOI form): 10.978.12345/99990
      GTIN-14, full 14 digits: 09789295055124
    """

    def __init__(self, provider: RangeProvider) -> None:
        self._provider = provider

    def parse(
        self, raw: str, check_integrity: bool = True,
    ) -> Ok[BookNumber] | Err[ParseError | IntegrityError]:
        """Parse raw into a BookNumber.

        check_integrity: fail with IntegrityError when the check digit is
        missing or wrong (use for scanned or typed input).
        """
        if not raw.strip():
            return _fail(ParseErrorKind.EMPTY_CODE, f">{raw}<")

        integrity: Callable[[_ParseState], Ok[_ParseState] | Err[IntegrityError]] = (
            _assert_integrity if check_integrity else Ok
        )
        provider = self._provider
        return (
            _extract_type_and_check_digit(raw)
            .bind(integrity)
            .bind(_extract_gs1)
            .bind(lambda s: _extract_group(provider, s))
            .bind(lambda s: _extract_registrant(provider, s))
            .bind(_extract_publication)
        )
