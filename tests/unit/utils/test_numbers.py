"""
Tests for abbreviated count parsing and formatting.
"""

from __future__ import annotations

import pytest

from tubescope.models.scraped import ParsedNumber
from tubescope.utils.numbers import (
    format_abbreviated_number,
    parse_abbreviated_number,
    parse_count_text,
)


class TestParseAbbreviatedNumber:
    """Tests for parse_abbreviated_number."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("6.2천", 6200),
            ("1.5만", 15000),
            ("15만", 150000),
            ("3억", 300_000_000),
            ("1.2억", 120_000_000),
        ],
    )
    def test_korean_units(self, text: str, expected: int) -> None:
        """Korean 천/만/억 units scale the number."""
        assert parse_abbreviated_number(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("3.2K", 3200),
            ("1.5M", 1_500_000),
            ("2B", 2_000_000_000),
            ("12k", 12000),
        ],
    )
    def test_english_units(self, text: str, expected: int) -> None:
        """English K/M/B units scale the number, case-insensitively."""
        assert parse_abbreviated_number(text) == expected

    def test_unit_wins_over_leading_digits(self) -> None:
        """A unit-suffixed value is never read as its bare digits."""
        assert parse_abbreviated_number("12K") == 12000

    def test_thousands_separators_are_ignored(self) -> None:
        """Comma separators are stripped before parsing."""
        assert parse_abbreviated_number("3,072") == 3072
        assert parse_abbreviated_number("1,234,567") == 1234567

    def test_surrounding_whitespace(self) -> None:
        """Leading and trailing whitespace does not matter."""
        assert parse_abbreviated_number("  1.5만 ") == 15000

    def test_leading_digits_fallback(self) -> None:
        """Text with leading digits and a non-unit suffix keeps the digits."""
        assert parse_abbreviated_number("42개") == 42

    @pytest.mark.parametrize("text", ["", "abc", None, "만"])
    def test_unparseable_is_zero(self, text: str | None) -> None:
        """Nothing parseable yields 0, never an exception."""
        assert parse_abbreviated_number(text) == 0

    def test_half_up_rounding(self) -> None:
        """Fractional results round half up."""
        assert parse_abbreviated_number("12.34만") == 123400
        assert parse_abbreviated_number("1.0005K") == 1001

    def test_long_unit_value_is_exact(self) -> None:
        """A unit value wider than the default decimal precision stays exact."""
        assert parse_abbreviated_number("1" * 30 + "만") == int("1" * 30) * 10_000

    @pytest.mark.parametrize("text", ["9" * 5000, "9" * 5000 + "만", "9" * 5000 + "K"])
    def test_oversized_digit_runs_are_zero(self, text: str) -> None:
        """Absurdly long digit runs yield 0 instead of raising."""
        assert parse_abbreviated_number(text) == 0


class TestParseCountText:
    """Tests for parse_count_text."""

    def test_korean_token_in_sentence(self) -> None:
        """The abbreviated token is found inside surrounding labels."""
        result = parse_count_text("구독자 15만명")
        assert result == ParsedNumber(value=150000, matched_text="15만")

    def test_english_token_in_sentence(self) -> None:
        """English tokens are found when no Korean unit is present."""
        result = parse_count_text("1.2M subscribers")
        assert result.value == 1_200_000
        assert result.matched_text == "1.2M"

    def test_english_unit_must_end_the_word(self) -> None:
        """A K/M/B that starts a longer word is not a unit."""
        result = parse_count_text("3Movies")
        assert result.value == 3
        assert result.matched_text is None

    def test_plain_number_has_no_matched_text(self) -> None:
        """Plain counts keep matched_text unset."""
        result = parse_count_text("좋아요 3,072개")
        assert result.value == 3072
        assert result.matched_text is None

    def test_korean_wins_over_english(self) -> None:
        """Korean-unit tokens are preferred over English ones."""
        assert parse_count_text("1K 또는 2만").value == 20000

    @pytest.mark.parametrize("text", ["", None, "구독자 없음", "0명"])
    def test_no_positive_count(self, text: str | None) -> None:
        """Text without a positive count yields an empty result."""
        assert parse_count_text(text) == ParsedNumber()


class TestFormatAbbreviatedNumber:
    """Tests for format_abbreviated_number."""

    @pytest.mark.parametrize(
        "num,expected",
        [
            (999, "999"),
            (1500, "1.5천"),
            (150000, "15만"),
            (123456, "12.3만"),
            (250_000_000, "2.5억"),
        ],
    )
    def test_korean(self, num: int, expected: str) -> None:
        """Korean units with one decimal and no trailing .0."""
        assert format_abbreviated_number(num) == expected

    @pytest.mark.parametrize(
        "num,expected",
        [
            (999, "999"),
            (3200, "3.2K"),
            (2_000_000, "2M"),
            (1_500_000_000, "1.5B"),
        ],
    )
    def test_english(self, num: int, expected: str) -> None:
        """English units with one decimal and no trailing .0."""
        assert format_abbreviated_number(num, korean=False) == expected
