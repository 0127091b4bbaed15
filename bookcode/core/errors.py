"""Error value hierarchy: parsing and conversion never raise.

Every error is a frozen dataclass value that can be pattern-matched,
serialized, and stored. Base class BookCodeError, five @final subclasses.

The four code errors carry a stable "x-y" code: x is the category
(1 parse, 2 integrity, 3 validate, 4 convert) and y the kind number.
Callers branch on the kind or the code; message text is informational.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import final

from bookcode.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class BookCodeError:
    """Base error value. NOT @final, it has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> BookCodeError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable keys."""
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------


class ParseErrorKind(Enum):
    EMPTY_CODE = 1
    UNEXPECTED_CHARACTERS = 2
    WRONG_LENGTH = 3
    UNKNOWN_GS1_ELEMENT = 4
    UNKNOWN_GROUP_ELEMENT = 5
    NO_MATCHING_RANGE = 6
    UNRESERVED_RANGE = 7

    @property
    def description(self) -> str:
        return _PARSE_DESCRIPTIONS[self]


_PARSE_DESCRIPTIONS: dict[ParseErrorKind, str] = {
    ParseErrorKind.EMPTY_CODE: "No code provided",
    ParseErrorKind.UNEXPECTED_CHARACTERS: "Unexpected characters in the code",
    ParseErrorKind.WRONG_LENGTH: "Code length is not matching any known format",
    ParseErrorKind.UNKNOWN_GS1_ELEMENT: "GS1 element is unknown",
    ParseErrorKind.UNKNOWN_GROUP_ELEMENT: "Group element is unknown",
    ParseErrorKind.NO_MATCHING_RANGE: "Failed to find any matching ISBN range",
    ParseErrorKind.UNRESERVED_RANGE: "Found matching ISBN range with 0 length",
}


class IntegrityErrorKind(Enum):
    CHECKSUM_MISMATCH = 1
    MISSING_CHECK_DIGIT = 2
    CANNOT_COMPARE = 3


class ValidateErrorKind(Enum):
    FORMAT_MISMATCH = 1
    TYPE_MISMATCH = 2


class ConvertErrorKind(Enum):
    NEW_GS1_UNSUPPORTED = 1
    MISSING_PACKAGING_INDICATOR = 2
    INCOMPATIBLE_SUBSET = 3


# ---------------------------------------------------------------------------
# Code errors
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ParseError(BookCodeError):
    """The input could not be decomposed into a book number.

    position is the offending part of the input with the failing
    segment wrapped in >…< markers, e.g. "...>@170951<796".
    """

    kind: ParseErrorKind
    position: str

    @staticmethod
    def of(kind: ParseErrorKind, position: str, source: str) -> ParseError:
        return ParseError(
            message=f"{kind.description} at {position}",
            code=f"1-{kind.value}",
            timestamp=UtcDatetime.now(),
            source=source,
            kind=kind,
            position=position,
        )

    def to_dict(self) -> dict[str, object]:
        return {**BookCodeError.to_dict(self), "kind": self.kind.name, "position": self.position}


@final
@dataclass(frozen=True, slots=True)
class IntegrityError(BookCodeError):
    """Check digit is wrong, missing, or cannot be computed."""

    kind: IntegrityErrorKind

    @staticmethod
    def of(kind: IntegrityErrorKind, message: str, source: str) -> IntegrityError:
        return IntegrityError(
            message=message,
            code=f"2-{kind.value}",
            timestamp=UtcDatetime.now(),
            source=source,
            kind=kind,
        )

    def to_dict(self) -> dict[str, object]:
        return {**BookCodeError.to_dict(self), "kind": self.kind.name}


@final
@dataclass(frozen=True, slots=True)
class ConvertError(BookCodeError):
    """A parsed code cannot be rendered in the requested type."""

    kind: ConvertErrorKind

    @staticmethod
    def of(kind: ConvertErrorKind, message: str, source: str) -> ConvertError:
        return ConvertError(
            message=message,
            code=f"4-{kind.value}",
            timestamp=UtcDatetime.now(),
            source=source,
            kind=kind,
        )

    def to_dict(self) -> dict[str, object]:
        return {**BookCodeError.to_dict(self), "kind": self.kind.name}


@final
@dataclass(frozen=True, slots=True)
class ValidateError(BookCodeError):
    """Input parsed, but is not the canonical string of the expected type."""

    kind: ValidateErrorKind
    cause: ConvertError | None = None

    @staticmethod
    def of(
        kind: ValidateErrorKind,
        message: str,
        source: str,
        cause: ConvertError | None = None,
    ) -> ValidateError:
        return ValidateError(
            message=message,
            code=f"3-{kind.value}",
            timestamp=UtcDatetime.now(),
            source=source,
            kind=kind,
            cause=cause,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            **BookCodeError.to_dict(self),
            "kind": self.kind.name,
            "cause": self.cause.to_dict() if self.cause is not None else None,
        }


# ---------------------------------------------------------------------------
# Range service errors
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class RangeServiceError(BookCodeError):
    """Range download, reading, or cache operation failed."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**BookCodeError.to_dict(self), "operation": self.operation}


type CodeError = ParseError | IntegrityError | ValidateError | ConvertError
