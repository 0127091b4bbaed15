"""ISBN: parse, convert and validate book codes in one call.

Each method parses its input first (with the integrity check enabled),
so parse and integrity errors surface from every method unchanged.

    >>> isbn = default_isbn()
    >>> isbn.convert_to_isbn10("978-5-17-095179-6")
    Ok(value='5-17-095179-5')
"""

from __future__ import annotations

import threading
from typing import final

from bookcode.codes.parser import Parser
from bookcode.codes.types import BookNumber, CodeType
from bookcode.core.errors import (
    CodeError,
    ConvertError,
    IntegrityError,
    ParseError,
    ValidateError,
    ValidateErrorKind,
)
from bookcode.core.result import Err, Ok
from bookcode.ranges.bundled import BundledRangeProvider
from bookcode.ranges.protocols import RangeProvider

type ParseFailure = ParseError | IntegrityError


@final
class ISBN:
    """Facade over Parser and BookNumber for a given RangeProvider."""

    def __init__(self, provider: RangeProvider) -> None:
        self._parser = Parser(provider)

    def parse(
        self, raw: str, check_integrity: bool = True,
    ) -> Ok[BookNumber] | Err[ParseFailure]:
        return self._parser.parse(raw, check_integrity)

    # -----------------------------------------------------------------------
    # Conversion
    # -----------------------------------------------------------------------

    def convert_to_isbn13(self, raw: str, separator: str = "-") -> Ok[str] | Err[CodeError]:
        """e.g. 978-92-95055-12-4"""
        return self.parse(raw).bind(lambda bn: bn.to_isbn13(separator))

    def convert_to_isbn10(self, raw: str, separator: str = "-") -> Ok[str] | Err[CodeError]:
        """e.g. 92-95055-12-8. Codes outside GS1 978 fail with 4-1."""
        return self.parse(raw).bind(lambda bn: bn.to_isbn10(separator))

    def convert_to_ean13(self, raw: str) -> Ok[str] | Err[CodeError]:
        return self.parse(raw).bind(lambda bn: bn.to_ean13())

    def convert_to_ean10(self, raw: str) -> Ok[str] | Err[CodeError]:
        return self.parse(raw).bind(lambda bn: bn.to_ean10())

    def convert_to_isbna(self, raw: str) -> Ok[str] | Err[CodeError]:
        """e.g. 10.978.12345/99990"""
        return self.parse(raw).bind(lambda bn: bn.to_isbna())

    def convert_to_gtin14(self, raw: str, indicator: int | None = None) -> Ok[str] | Err[CodeError]:
        """Without indicator, only GTIN-14 input converts (its own indicator)."""
        return self.parse(raw).bind(lambda bn: bn.to_gtin14(indicator))

    def convert_to_ismn(self, raw: str) -> Ok[str] | Err[CodeError]:
        return self.parse(raw).bind(lambda bn: bn.to_ismn())

    def convert_to_music_ean(self, raw: str) -> Ok[str] | Err[CodeError]:
        return self.parse(raw).bind(lambda bn: bn.to_music_ean())

    # -----------------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------------

    def validate_as_format(
        self, raw: str, target: CodeType,
    ) -> Ok[BookNumber] | Err[CodeError]:
        """Ok when raw is exactly the canonical target string, separator kept.

        3-2 when the code can't be expressed as target (the ConvertError is
        attached as cause); 3-1 when it can, but raw is spelled differently.
        """
        source = "facade.ISBN.validate_as_format"

        def check(bn: BookNumber) -> Ok[BookNumber] | Err[ValidateError]:
            match bn.to_format(target, keep_separator=True):
                case Err(cause):
                    return Err(ValidateError.of(
                        ValidateErrorKind.TYPE_MISMATCH,
                        f"'{raw}' is not a valid {target.printed_name}, as it can't be converted to it",
                        source,
                        cause=cause,
                    ))
                case Ok(converted) if converted != raw:
                    return Err(ValidateError.of(
                        ValidateErrorKind.FORMAT_MISMATCH,
                        f"'{raw}' is not a valid {target.printed_name}, expected '{converted}'",
                        source,
                    ))
                case Ok():
                    return Ok(bn)

        return self.parse(raw).bind(check)

    def validate_as_any(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        """Detect the type, then require raw to be its canonical spelling."""
        source = "facade.ISBN.validate_as_any"

        def check(bn: BookNumber) -> Ok[BookNumber] | Err[ValidateError | ConvertError]:
            expected = bn.to_source_format()
            match expected:
                case Err() as e:
                    return e
                case Ok(converted) if converted != raw:
                    return Err(ValidateError.of(
                        ValidateErrorKind.FORMAT_MISMATCH,
                        f"'{raw}' is detected to be {bn.metadata.type.printed_name}, "
                        f"but incorrectly formatted. Expected: '{converted}'",
                        source,
                    ))
                case Ok():
                    return Ok(bn)

        return self.parse(raw).bind(check)

    def validate_as_isbn13(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.ISBN_13)

    def validate_as_isbn10(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.ISBN_10)

    def validate_as_ean13(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.EAN_13)

    def validate_as_ean10(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.EAN_10)

    def validate_as_isbna(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.ISBN_A)

    def validate_as_gtin14(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.GTIN_14)

    def validate_as_ismn(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.ISMN)

    def validate_as_music_ean(self, raw: str) -> Ok[BookNumber] | Err[CodeError]:
        return self.validate_as_format(raw, CodeType.MUSIC_EAN)


# ---------------------------------------------------------------------------
# Default instance
# ---------------------------------------------------------------------------

_default: ISBN | None = None
_default_lock = threading.Lock()


def default_isbn() -> ISBN:
    """Shared facade over the bundled ranges, built on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = ISBN(BundledRangeProvider())
    return _default
