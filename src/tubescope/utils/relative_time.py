"""Relative publish-time formatting ("3일 전", "2 months ago")."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

# Coarsest unit first. Month and year lengths are fixed approximations.
_UNIT_SECONDS: list[tuple[str, int]] = [
    ("year", 31_536_000),
    ("month", 2_592_000),
    ("day", 86_400),
    ("hour", 3_600),
    ("minute", 60),
]

_KOREAN_UNITS: dict[str, str] = {
    "year": "년",
    "month": "개월",
    "day": "일",
    "hour": "시간",
    "minute": "분",
}

_JUST_NOW: dict[str, str] = {
    "ko": "방금 전",
    "en": "just now",
}


def parse_timestamp(timestamp: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp (trailing ``Z`` allowed) as an aware datetime."""
    if isinstance(timestamp, datetime):
        parsed = timestamp
    else:
        text = timestamp.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _render(amount: int, unit: str, locale: str) -> str:
    if locale == "en":
        suffix = "" if amount == 1 else "s"
        return f"{amount} {unit}{suffix} ago"
    return f"{amount}{_KOREAN_UNITS[unit]} 전"


def format_relative_time(
    timestamp: str | datetime | None,
    now: datetime | None = None,
    locale: str = "ko",
) -> str:
    """
    Describe how long ago a timestamp was, in the coarsest whole unit.

    Only one unit is shown: a timestamp 1 year and 3 months old renders as
    ``"1년 전"``, not ``"1년 3개월 전"``.

    Parameters
    ----------
    timestamp : str | datetime | None
        ISO-8601 timestamp. Naive values are treated as UTC.
    now : datetime | None, optional
        Reference time (default: current UTC time).
    locale : str, optional
        ``"ko"`` (default) or ``"en"``.

    Returns
    -------
    str
        Relative time text, or an empty string when the timestamp is
        missing or unparseable (callers omit the label in that case).
    """
    if not timestamp:
        return ""

    try:
        published = parse_timestamp(timestamp)
        reference = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
        elapsed = int((reference - published).total_seconds())
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug("Could not parse timestamp %r: %s", timestamp, e)
        return ""

    for unit, seconds in _UNIT_SECONDS:
        amount = elapsed // seconds
        if amount > 0:
            return _render(amount, unit, locale)

    return _JUST_NOW.get(locale, _JUST_NOW["ko"])
