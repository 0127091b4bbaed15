"""Book number types: the decomposed identifier produced by the parser.

BookNumber follows the element structure of the ISBN Users' Manual:
GS1 element, registration group, registrant, publication, check digit.
Element widths live in Metadata so leading zeros survive ("04" is not 4).

Every to_* method derives a new string with a freshly computed check
digit and never mutates the record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import assert_never, final

from bookcode.core import checksum
from bookcode.core.errors import (
    ConvertError,
    ConvertErrorKind,
    IntegrityError,
    IntegrityErrorKind,
)
from bookcode.core.result import Err, Ok

DEFAULT_GS1: int = 978
BOOK_NUMBER_LENGTH: int = 9
DOI_PREFIX: str = "10"
MAX_PACKAGING_INDICATOR: int = 8


class Subset(Enum):
    """Conversion is only defined between types of the same subset."""

    DEFAULT = "DEFAULT"
    MUSIC = "MUSIC"


class CodeType(Enum):
    """Representation a code was written in. Value is the printed name."""

    ISBN_13 = "ISBN-13"
    ISBN_10 = "ISBN-10"
    EAN_13 = "EAN-13"
    EAN_10 = "EAN-10"
    ISBN_A = "ISBN-A"
    GTIN_14 = "GTIN-14"
    ISMN = "ISMN"
    MUSIC_EAN = "MUSIC-EAN"

    @property
    def printed_name(self) -> str:
        return self.value

    @property
    def subset(self) -> Subset:
        if self in (CodeType.ISMN, CodeType.MUSIC_EAN):
            return Subset.MUSIC
        return Subset.DEFAULT

    @property
    def is_short(self) -> bool:
        """10-digit family (ISBN-10, EAN-10)."""
        return self in (CodeType.ISBN_10, CodeType.EAN_10)


@final
@dataclass(frozen=True, slots=True)
class Metadata:
    """How the code was written, plus element widths and agency.

    sanitised_code is the digit string the check digit is verified
    against: without separators and without the check digit, except for
    GTIN-14 where it is the full 14-character code.
    """

    sanitised_code: str
    type: CodeType
    separator: str | None
    packaging_indicator: int | None
    check_digit: str | None
    group_length: int
    registrant_length: int
    agency_name: str

    @property
    def publication_length(self) -> int:
        return BOOK_NUMBER_LENGTH - self.group_length - self.registrant_length

    @property
    def has_check_digit(self) -> bool:
        return self.check_digit is not None

    def _compare(self) -> Ok[bool] | Err[str]:
        assert self.check_digit is not None
        if self.type is CodeType.GTIN_14:
            return checksum.compare_gtin14(self.sanitised_code, self.check_digit)
        return checksum.compare(self.sanitised_code, self.check_digit, self.type.is_short)

    @property
    def is_check_digit_valid(self) -> bool:
        """False when absent, wrong, or not computable. Never fails."""
        if self.check_digit is None:
            return False
        return self._compare().unwrap_or(False)

    def assert_check_digit(self) -> Ok[None] | Err[IntegrityError]:
        source = "codes.types.Metadata.assert_check_digit"
        if self.check_digit is None:
            return Err(IntegrityError.of(
                IntegrityErrorKind.MISSING_CHECK_DIGIT,
                f"Supplied {self.type.printed_name} has no check digit",
                source,
            ))
        if self.type is CodeType.GTIN_14:
            return checksum.assert_gtin14(self.sanitised_code, self.check_digit)
        return checksum.assert_check_digit(
            self.sanitised_code, self.check_digit, self.type.is_short,
        )


def _check_digit(code: str, is_short: bool) -> str:
    # Element strings are built from ints, so they are always digits of
    # the right length here.
    return checksum.calculate(code, is_short).unwrap()


@final
@dataclass(frozen=True, slots=True)
class BookNumber:
    """A parsed code, convertible to every type of its subset."""

    gs1: int
    group: int
    registrant: int
    publication: int
    metadata: Metadata

    # --- Element views ---

    @property
    def gs1_element(self) -> str:
        return str(self.gs1)

    @property
    def group_element(self) -> str:
        return str(self.group).zfill(self.metadata.group_length)

    @property
    def registrant_element(self) -> str:
        return str(self.registrant).zfill(self.metadata.registrant_length)

    @property
    def publication_element(self) -> str:
        return str(self.publication).zfill(self.metadata.publication_length)

    @property
    def book_number_element(self) -> str:
        """Group + registrant + publication, the 9-digit core."""
        return f"{self.group_element}{self.registrant_element}{self.publication_element}"

    # --- Conversion guards ---

    def _require_subset(
        self, target: CodeType, source: str,
    ) -> Ok[None] | Err[ConvertError]:
        own = self.metadata.type
        if own.subset is not target.subset:
            return Err(ConvertError.of(
                ConvertErrorKind.INCOMPATIBLE_SUBSET,
                f"{own.printed_name} can't be converted to {target.printed_name} "
                f"(incompatible subsets {own.subset.value} and {target.subset.value})",
                source,
            ))
        return Ok(None)

    def _require_default_gs1(
        self, target: CodeType, source: str,
    ) -> Ok[None] | Err[ConvertError]:
        if self.gs1 != DEFAULT_GS1:
            return Err(ConvertError.of(
                ConvertErrorKind.NEW_GS1_UNSUPPORTED,
                f"Input can't be converted to {target.printed_name} as it contains "
                f"new GS1 value {self.gs1} (must be {DEFAULT_GS1})",
                source,
            ))
        return Ok(None)

    # --- 13-digit family ---

    def _join13(self, separator: str) -> str:
        body = f"{self.gs1_element}{self.book_number_element}"
        check = _check_digit(body, is_short=False)
        return separator.join((
            self.gs1_element, self.group_element, self.registrant_element,
            self.publication_element, check,
        ))

    def to_isbn13(self, separator: str = "-") -> Ok[str] | Err[ConvertError]:
        return self._require_subset(CodeType.ISBN_13, "codes.types.BookNumber.to_isbn13").map(
            lambda _: self._join13(separator)
        )

    def to_ean13(self) -> Ok[str] | Err[ConvertError]:
        """ISBN-13 without separators (POS barcodes)."""
        return self._require_subset(CodeType.EAN_13, "codes.types.BookNumber.to_ean13").map(
            lambda _: self._join13("")
        )

    def to_ismn(self) -> Ok[str] | Err[ConvertError]:
        return self._require_subset(CodeType.ISMN, "codes.types.BookNumber.to_ismn").map(
            lambda _: self._join13("-")
        )

    def to_music_ean(self) -> Ok[str] | Err[ConvertError]:
        return self._require_subset(CodeType.MUSIC_EAN, "codes.types.BookNumber.to_music_ean").map(
            lambda _: self._join13("")
        )

    def to_isbna(self) -> Ok[str] | Err[ConvertError]:
        """ISBN-A, the DOI form: 10.<gs1>.<group><registrant>/<publication><check>."""
        def render(_: None) -> str:
            check = _check_digit(f"{self.gs1_element}{self.book_number_element}", is_short=False)
            return (
                f"{DOI_PREFIX}.{self.gs1_element}."
                f"{self.group_element}{self.registrant_element}/"
                f"{self.publication_element}{check}"
            )

        return self._require_subset(CodeType.ISBN_A, "codes.types.BookNumber.to_isbna").map(render)

    def to_gtin14(self, indicator: int | None = None) -> Ok[str] | Err[ConvertError]:
        """Logistics code: packaging indicator + 12-digit core + check digit.

        indicator defaults to the one parsed from a GTIN-14 input.
        """
        source = "codes.types.BookNumber.to_gtin14"
        match self._require_subset(CodeType.GTIN_14, source):
            case Err() as e:
                return e
            case Ok():
                pass
        if indicator is None:
            indicator = self.metadata.packaging_indicator
        if indicator is None or not 0 <= indicator <= MAX_PACKAGING_INDICATOR:
            return Err(ConvertError.of(
                ConvertErrorKind.MISSING_PACKAGING_INDICATOR,
                f"Missing valid packaging indicator for GTIN-14, value is {indicator} "
                "(expected single digit from 0 to 8)",
                source,
            ))
        body = f"{indicator}{self.gs1_element}{self.book_number_element}"
        return Ok(f"{body}{checksum.calculate_gtin(body).unwrap()}")

    # --- 10-digit family ---

    def _join10(self, separator: str) -> str:
        check = _check_digit(self.book_number_element, is_short=True)
        return separator.join((
            self.group_element, self.registrant_element, self.publication_element, check,
        ))

    def to_isbn10(self, separator: str = "-") -> Ok[str] | Err[ConvertError]:
        source = "codes.types.BookNumber.to_isbn10"
        return (
            self._require_subset(CodeType.ISBN_10, source)
            .bind(lambda _: self._require_default_gs1(CodeType.ISBN_10, source))
            .map(lambda _: self._join10(separator))
        )

    def to_ean10(self) -> Ok[str] | Err[ConvertError]:
        """ISBN-10 without separators."""
        source = "codes.types.BookNumber.to_ean10"
        return (
            self._require_subset(CodeType.EAN_10, source)
            .bind(lambda _: self._require_default_gs1(CodeType.EAN_10, source))
            .map(lambda _: self._join10(""))
        )

    # --- Dispatch ---

    def to_format(
        self, target: CodeType, keep_separator: bool = False,
    ) -> Ok[str] | Err[ConvertError]:
        """Convert using only what the record holds.

        keep_separator reuses the separator of the parsed input for the
        types that have one; otherwise "-" is used.
        """
        separator = (self.metadata.separator if keep_separator else None) or "-"
        match target:
            case CodeType.ISBN_13:
                return self.to_isbn13(separator)
            case CodeType.ISBN_10:
                return self.to_isbn10(separator)
            case CodeType.EAN_13:
                return self.to_ean13()
            case CodeType.EAN_10:
                return self.to_ean10()
            case CodeType.ISBN_A:
                return self.to_isbna()
            case CodeType.GTIN_14:
                return self.to_gtin14()
            case CodeType.ISMN:
                return self.to_ismn()
            case CodeType.MUSIC_EAN:
                return self.to_music_ean()
            case _:
                assert_never(target)

    def to_source_format(self, keep_separator: bool = True) -> Ok[str] | Err[ConvertError]:
        """Convert back to the type the code was parsed from."""
        return self.to_format(self.metadata.type, keep_separator)
