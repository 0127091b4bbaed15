"""Check digit arithmetic for ISBN-10, ISBN-13/EAN-13 and GTIN-14.

Inputs are bare digit strings: separators must be removed by the caller.
calculate_* and compare* return Err[str] when the input is too short or
contains non-digit characters; assert_* turn every failure into an
IntegrityError.
"""

from __future__ import annotations

from bookcode.core.errors import IntegrityError, IntegrityErrorKind
from bookcode.core.result import Err, Ok

_ISBN10_CORE_LENGTH = 9
_GTIN_MIN_LENGTH = 12
_ISBN13_CORE_LENGTH = 12
_GTIN14_CORE_LENGTH = 13


def _digits(code: str) -> Ok[list[int]] | Err[str]:
    # str.isdigit() accepts superscripts and other Unicode digits
    if not all("0" <= c <= "9" for c in code):
        return Err(f"Expected only decimal digits, got '{code}'")
    return Ok([ord(c) - ord("0") for c in code])


def calculate_isbn10(core: str) -> Ok[str] | Err[str]:
    """Check digit over exactly 9 digits, weights 10 down to 2.

    A checksum of 10 is written as 'X'.
    """
    if len(core) != _ISBN10_CORE_LENGTH:
        return Err(f"Expected input exactly 9 characters long for ISBN-10, got {len(core)}")
    match _digits(core):
        case Err() as e:
            return e
        case Ok(digits):
            total = sum(d * (10 - i) for i, d in enumerate(digits))
    checksum = (11 - total % 11) % 11
    return Ok("X" if checksum == 10 else str(checksum))


def calculate_gtin(code: str) -> Ok[str] | Err[str]:
    """Check digit over 12 or more digits, weights 3,1,3,... from the right.

    Weighting is anchored to the rightmost digit, so the same rule serves
    ISBN-13 (12 digits) and GTIN-14 (13 digits).
    """
    if len(code) < _GTIN_MIN_LENGTH:
        return Err(
            f"Expected input at least 12 characters long for ISBN-13 or GTIN-14, got {len(code)}"
        )
    match _digits(code):
        case Err() as e:
            return e
        case Ok(digits):
            total = sum(d * (3 if i % 2 == 0 else 1) for i, d in enumerate(reversed(digits)))
    return Ok(str((10 - total % 10) % 10))


def calculate(code: str, is_short: bool) -> Ok[str] | Err[str]:
    """Check digit for ISBN-10 (is_short) or ISBN-13.

    code may include its check digit; it is cut to 9 or 12 characters.
    """
    if is_short:
        return calculate_isbn10(code[:_ISBN10_CORE_LENGTH])
    return calculate_gtin(code[:_ISBN13_CORE_LENGTH])


def compare(code: str, check_digit: str, is_short: bool) -> Ok[bool] | Err[str]:
    """Recompute the check digit of code and compare with check_digit."""
    return calculate(code, is_short).map(lambda expected: expected == check_digit)


def compare_gtin14(code: str, check_digit: str) -> Ok[bool] | Err[str]:
    """Same as compare, over the first 13 digits of a GTIN-14."""
    return calculate_gtin(code[:_GTIN14_CORE_LENGTH]).map(lambda expected: expected == check_digit)


def _assert(
    compared: Ok[bool] | Err[str], printed_name: str, source: str,
) -> Ok[None] | Err[IntegrityError]:
    match compared:
        case Err(reason):
            return Err(IntegrityError.of(
                IntegrityErrorKind.CANNOT_COMPARE,
                f"Failed to compare check digit - wrong input format ({reason})",
                source,
            ))
        case Ok(False):
            return Err(IntegrityError.of(
                IntegrityErrorKind.CHECKSUM_MISMATCH,
                f"Supplied check digit for {printed_name} doesn't match calculated value",
                source,
            ))
        case Ok(_):
            return Ok(None)


def assert_check_digit(
    code: str, check_digit: str, is_short: bool,
) -> Ok[None] | Err[IntegrityError]:
    return _assert(
        compare(code, check_digit, is_short),
        "ISBN-10" if is_short else "ISBN-13",
        "core.checksum.assert_check_digit",
    )


def assert_gtin14(code: str, check_digit: str) -> Ok[None] | Err[IntegrityError]:
    return _assert(
        compare_gtin14(code, check_digit),
        "GTIN-14",
        "core.checksum.assert_gtin14",
    )
