"""Unit tests for promodesk.utils.text_normalizer and promodesk.utils.ids."""

from __future__ import annotations

import re

import pytest

from promodesk.utils.ids import generate_id
from promodesk.utils.text_normalizer import (
    collation_key,
    format_brl,
    matches_search,
    normalize_search_text,
    parse_amount,
    strip_diacritics,
)


# ======================================================================
# Search normalization
# ======================================================================


class TestNormalizeSearchText:
    def test_strips_accents_case_and_punctuation(self) -> None:
        assert normalize_search_text("  São-Paulo, SP ") == "sao paulo sp"

    def test_none_and_empty(self) -> None:
        assert normalize_search_text(None) == ""
        assert normalize_search_text("") == ""

    def test_non_string_values(self) -> None:
        assert normalize_search_text(98.5) == "98 5"

    def test_strip_diacritics(self) -> None:
        assert strip_diacritics("Forró Axé Ção") == "Forro Axe Cao"


class TestMatchesSearch:
    def test_substring_in_any_field(self) -> None:
        assert matches_search("paulo", "Rádio Cidade", "São Paulo")

    def test_no_match(self) -> None:
        assert not matches_search("recife", "Rádio Cidade", "São Paulo")

    def test_blank_term_matches_everything(self) -> None:
        assert matches_search("  ", "anything")
        assert matches_search("", None)

    def test_none_fields_are_skipped(self) -> None:
        assert matches_search("mpb", None, "MPB")


class TestCollationKey:
    def test_accented_names_sort_with_plain_ones(self) -> None:
        names = ["Zé", "Érica", "eduardo", "Ana"]
        assert sorted(names, key=collation_key) == ["Ana", "eduardo", "Érica", "Zé"]


# ======================================================================
# Amounts
# ======================================================================


class TestParseAmount:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.234,56", 1234.56),
            ("1234,5", 1234.5),
            ("R$ 2.000,00", 2000.0),
            ("1500", 1500.0),
            ("99.90", 99.9),
            ("1.500", 1500.0),
            ("R$ 1.500.000", 1500000.0),
            ("1.5", 1.5),
            ("12.3456", 12.3456),
            (250, 250.0),
        ],
    )
    def test_parses(self, text, expected: float) -> None:
        assert parse_amount(text) == pytest.approx(expected)

    def test_empty_is_none(self) -> None:
        assert parse_amount("   ") is None
        assert parse_amount(None) is None

    def test_garbage_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_amount("mil reais")

    def test_format_brl(self) -> None:
        assert format_brl(1234.5) == "R$ 1.234,50"
        assert format_brl(None) == ""


# ======================================================================
# Ids
# ======================================================================


class TestGenerateId:
    def test_shape(self) -> None:
        assert re.fullmatch(r"id_1718000000000_[0-9a-z]{9}", generate_id(1718000000000))

    def test_distinct(self) -> None:
        assert len({generate_id() for _ in range(200)}) == 200
