"""
Tests for duration formatting utilities.
"""

from __future__ import annotations

import pytest

from tubescope.utils.duration import (
    format_seconds,
    iso8601_to_seconds,
    parse_iso8601_duration,
)


class TestParseIso8601Duration:
    """Tests for parse_iso8601_duration."""

    @pytest.mark.parametrize(
        "duration,expected",
        [
            ("PT10M30S", "10:30"),
            ("PT1H2M3S", "1:02:03"),
            ("PT45S", "0:45"),
            ("PT2H", "2:00:00"),
            ("PT5M", "5:00"),
        ],
    )
    def test_formats_components(self, duration: str, expected: str) -> None:
        """Missing components count as zero."""
        assert parse_iso8601_duration(duration) == expected

    def test_empty_is_zero(self) -> None:
        """Empty input renders as 0:00."""
        assert parse_iso8601_duration("") == "0:00"
        assert parse_iso8601_duration(None) == "0:00"

    def test_unrecognized_returned_unchanged(self) -> None:
        """Non-duration text passes through for display."""
        assert parse_iso8601_duration("LIVE") == "LIVE"


class TestIso8601ToSeconds:
    """Tests for iso8601_to_seconds."""

    def test_total_seconds(self) -> None:
        """Components are summed into seconds."""
        assert iso8601_to_seconds("PT1H2M3S") == 3723

    def test_malformed_is_zero(self) -> None:
        """Malformed or empty input is 0 seconds."""
        assert iso8601_to_seconds("three minutes") == 0
        assert iso8601_to_seconds(None) == 0


class TestFormatSeconds:
    """Tests for format_seconds."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "0:00"),
            (-5, "0:00"),
            (None, "0:00"),
            (59, "0:59"),
            (212, "3:32"),
            (3661, "1:01:01"),
            (90.9, "1:30"),
            (float("nan"), "0:00"),
            (float("inf"), "0:00"),
            (float("-inf"), "0:00"),
        ],
    )
    def test_formats(self, seconds: float | None, expected: str) -> None:
        """Seconds render as M:SS or H:MM:SS."""
        assert format_seconds(seconds) == expected
