"""Video duration formatting.

Converts ISO-8601 durations (``PT10M30S``) and raw second counts into the
``H:MM:SS`` / ``M:SS`` form YouTube shows on thumbnails.
"""

from __future__ import annotations

import math
import re

_ISO_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def _format_clock(hours: int, minutes: int, seconds: int) -> str:
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def _match_iso_duration(duration: str) -> tuple[int, int, int] | None:
    match = _ISO_DURATION_RE.search(duration)
    if not match:
        return None
    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return hours, minutes, seconds


def parse_iso8601_duration(duration: str | None) -> str:
    """
    Format an ISO-8601 duration for display.

    Missing hour/minute/second components count as zero. Input that does
    not look like a ``PT#H#M#S`` duration is returned unchanged so the
    display layer still has something to show.

    Parameters
    ----------
    duration : str | None
        ISO-8601 duration such as ``"PT1H2M3S"``.

    Returns
    -------
    str
        ``"H:MM:SS"`` when there is an hour component, otherwise ``"M:SS"``;
        ``"0:00"`` for empty input.

    Examples
    --------
    >>> parse_iso8601_duration("PT10M30S")
    '10:30'
    >>> parse_iso8601_duration("PT1H2M3S")
    '1:02:03'
    """
    if not duration:
        return "0:00"

    parts = _match_iso_duration(duration)
    if parts is None:
        return duration
    return _format_clock(*parts)


def iso8601_to_seconds(duration: str | None) -> int:
    """Total seconds of an ISO-8601 duration; 0 when empty or malformed."""
    if not duration:
        return 0
    parts = _match_iso_duration(duration)
    if parts is None:
        return 0
    hours, minutes, seconds = parts
    return hours * 3600 + minutes * 60 + seconds


def format_seconds(total_seconds: int | float | None) -> str:
    """
    Format a second count for display.

    Parameters
    ----------
    total_seconds : int | float | None
        Duration in seconds. Fractions are truncated.

    Returns
    -------
    str
        ``"H:MM:SS"`` or ``"M:SS"``; ``"0:00"`` for missing, non-finite or
        non-positive input.
    """
    if not total_seconds or not math.isfinite(total_seconds) or total_seconds <= 0:
        return "0:00"

    total = int(total_seconds)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return _format_clock(hours, minutes, seconds)
