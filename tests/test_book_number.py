"""Tests for bookcode.codes.types: CodeType, Metadata and conversions."""

from __future__ import annotations

import dataclasses

import pytest

from bookcode.codes.types import BookNumber, CodeType, Metadata, Subset
from bookcode.core.errors import ConvertError
from bookcode.core.result import Err, Ok


def _metadata(code_type: CodeType = CodeType.ISBN_13, **overrides: object) -> Metadata:
    fields: dict[str, object] = {
        "sanitised_code": "978517095179",
        "type": code_type,
        "separator": "-",
        "packaging_indicator": None,
        "check_digit": "6",
        "group_length": 1,
        "registrant_length": 2,
        "agency_name": "former U.S.S.R",
    }
    fields.update(overrides)
    return Metadata(**fields)  # type: ignore[arg-type]


def _book(gs1: int = 978, code_type: CodeType = CodeType.ISBN_13, **overrides: object) -> BookNumber:
    return BookNumber(
        gs1=gs1, group=5, registrant=17, publication=95179,
        metadata=_metadata(code_type, **overrides),
    )


def _music() -> BookNumber:
    return BookNumber(
        gs1=979, group=0, registrant=2600, publication=43,
        metadata=_metadata(
            CodeType.ISMN,
            sanitised_code="979026000043", check_digit="8",
            registrant_length=4, agency_name="Musicland",
        ),
    )


def _error_code(result: Ok[str] | Err[ConvertError]) -> str:
    match result:
        case Err(e):
            return e.code
        case Ok(v):
            pytest.fail(f"Expected ConvertError, got {v}")


class TestCodeType:
    def test_printed_names(self) -> None:
        assert [t.printed_name for t in CodeType] == [
            "ISBN-13", "ISBN-10", "EAN-13", "EAN-10", "ISBN-A", "GTIN-14", "ISMN", "MUSIC-EAN",
        ]

    def test_subsets(self) -> None:
        music = {t for t in CodeType if t.subset is Subset.MUSIC}
        assert music == {CodeType.ISMN, CodeType.MUSIC_EAN}

    def test_short_types(self) -> None:
        assert {t for t in CodeType if t.is_short} == {CodeType.ISBN_10, CodeType.EAN_10}


class TestMetadata:
    def test_publication_length_is_derived(self) -> None:
        assert _metadata().publication_length == 6

    def test_missing_check_digit(self) -> None:
        md = _metadata(check_digit=None)
        assert not md.has_check_digit
        assert not md.is_check_digit_valid
        match md.assert_check_digit():
            case Err(e):
                assert e.code == "2-2"
                assert e.message == "Supplied ISBN-13 has no check digit"
            case Ok(_):
                pytest.fail("Expected missing check digit")

    def test_malformed_code_is_simply_invalid(self) -> None:
        assert not _metadata(sanitised_code="9785X7095179").is_check_digit_valid

    def test_gtin14_verified_over_full_code(self) -> None:
        md = _metadata(
            CodeType.GTIN_14, sanitised_code="19785170951793", check_digit="3",
            packaging_indicator=1, separator=None,
        )
        assert md.is_check_digit_valid
        assert md.assert_check_digit() == Ok(None)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            _book().gs1 = 979  # type: ignore[misc]


class TestConversions:
    def test_13_digit_family(self) -> None:
        bn = _book()
        assert bn.to_isbn13() == Ok("978-5-17-095179-6")
        assert bn.to_isbn13(" ") == Ok("978 5 17 095179 6")
        assert bn.to_ean13() == Ok("9785170951796")
        assert bn.to_isbna() == Ok("10.978.517/0951796")

    def test_10_digit_family(self) -> None:
        bn = _book()
        assert bn.to_isbn10() == Ok("5-17-095179-5")
        assert bn.to_isbn10(" ") == Ok("5 17 095179 5")
        assert bn.to_ean10() == Ok("5170951795")

    def test_gtin14_indicator(self) -> None:
        bn = _book()
        assert bn.to_gtin14(0) == Ok("09785170951796")
        assert bn.to_gtin14(1) == Ok("19785170951793")

    def test_gtin14_defaults_to_parsed_indicator(self) -> None:
        bn = _book(code_type=CodeType.GTIN_14, packaging_indicator=1)
        assert bn.to_gtin14() == Ok("19785170951793")

    @pytest.mark.parametrize("indicator", [None, 9, -1])
    def test_gtin14_invalid_indicator(self, indicator: int | None) -> None:
        assert _error_code(_book().to_gtin14(indicator)) == "4-2"

    def test_new_gs1_has_no_10_digit_form(self) -> None:
        bn = _book(gs1=979)
        assert _error_code(bn.to_isbn10()) == "4-1"
        assert _error_code(bn.to_ean10()) == "4-1"
        assert isinstance(bn.to_isbn13(), Ok)

    def test_music_subset(self) -> None:
        bn = _music()
        assert bn.to_ismn() == Ok("979-0-2600-0043-8")
        assert bn.to_music_ean() == Ok("9790260000438")

    def test_subsets_do_not_mix(self) -> None:
        music, book = _music(), _book()
        for result in (music.to_isbn13(), music.to_isbn10(), music.to_gtin14(0), music.to_isbna()):
            assert _error_code(result) == "4-3"
        assert _error_code(book.to_ismn()) == "4-3"
        assert _error_code(book.to_music_ean()) == "4-3"


class TestToFormat:
    @pytest.mark.parametrize(
        ("target", "expected"),
        [
            (CodeType.ISBN_13, "978 5 17 095179 6"),
            (CodeType.ISBN_10, "5 17 095179 5"),
            (CodeType.EAN_13, "9785170951796"),
            (CodeType.EAN_10, "5170951795"),
            (CodeType.ISBN_A, "10.978.517/0951796"),
        ],
    )
    def test_keeps_parsed_separator(self, target: CodeType, expected: str) -> None:
        bn = _book(separator=" ")
        assert bn.to_format(target, keep_separator=True) == Ok(expected)

    def test_default_separator(self) -> None:
        assert _book(separator=" ").to_format(CodeType.ISBN_13) == Ok("978-5-17-095179-6")

    def test_source_format(self) -> None:
        assert _book(separator=" ").to_source_format() == Ok("978 5 17 095179 6")
        assert _music().to_source_format() == Ok("979-0-2600-0043-8")
