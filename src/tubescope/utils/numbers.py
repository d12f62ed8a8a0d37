"""Abbreviated count parsing and formatting.

YouTube renders counts in the viewer's locale: Korean pages use the
천/만/억 unit system ("6.2천", "1.5만"), English pages use K/M/B
("3.2K", "1.5M"), and exact counts carry thousands separators
("3,072"). This module turns all of those back into integers and back
into display text.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from tubescope.models.scraped import ParsedNumber

KOREAN_UNIT_MULTIPLIERS: dict[str, int] = {
    "천": 1_000,
    "만": 10_000,
    "억": 100_000_000,
}

ENGLISH_UNIT_MULTIPLIERS: dict[str, int] = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

# Whole-string forms, applied after separators are stripped.
_KOREAN_EXACT_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([천만억])$")
_ENGLISH_EXACT_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([KMB])$", re.IGNORECASE)
_LEADING_DIGITS_RE = re.compile(r"^\d+")

# Longer digit runs are treated as unparseable.
_MAX_COUNT_DIGITS = 100

# Search forms for count text embedded in prose ("구독자 15만명").
_KOREAN_SEARCH_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)([천만억])")
_ENGLISH_SEARCH_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)([KMB])(?![A-Za-z])", re.IGNORECASE)
_PLAIN_SEARCH_RE = re.compile(r"\d[\d,]*")


def _scale(number_text: str, multiplier: int) -> int:
    """Multiply a decimal literal and round half-up to an int."""
    if len(number_text) > _MAX_COUNT_DIGITS:
        return 0
    try:
        with localcontext() as ctx:
            # Enough precision that the product is exact before rounding.
            ctx.prec = len(number_text) + 12
            scaled = Decimal(number_text) * multiplier
            return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0


def parse_abbreviated_number(text: str | None) -> int:
    """
    Convert locale-abbreviated number text into an integer count.

    Korean units are tried first, then English units, then a plain integer
    parse of the leading digits. Unit matching always precedes the plain
    parse so that ``"12K"`` is never read as ``12``.

    Parameters
    ----------
    text : str | None
        Count text such as ``"6.2천"``, ``"1.5만"``, ``"3.2K"`` or ``"3,072"``.

    Returns
    -------
    int
        The count, or 0 when nothing parseable is present.

    Examples
    --------
    >>> parse_abbreviated_number("1.5만")
    15000
    >>> parse_abbreviated_number("1.5M")
    1500000
    >>> parse_abbreviated_number("abc")
    0
    """
    if not text or not isinstance(text, str):
        return 0

    clean_text = text.replace(",", "").strip()

    korean_match = _KOREAN_EXACT_RE.match(clean_text)
    if korean_match:
        return _scale(korean_match.group(1), KOREAN_UNIT_MULTIPLIERS[korean_match.group(2)])

    english_match = _ENGLISH_EXACT_RE.match(clean_text)
    if english_match:
        unit = english_match.group(2).upper()
        return _scale(english_match.group(1), ENGLISH_UNIT_MULTIPLIERS[unit])

    digits_match = _LEADING_DIGITS_RE.match(clean_text)
    if digits_match and len(digits_match.group(0)) <= _MAX_COUNT_DIGITS:
        return int(digits_match.group(0))

    return 0


def parse_count_text(text: str | None) -> ParsedNumber:
    """
    Find and parse the first count embedded in a piece of display text.

    Used on strings like ``"구독자 15만명"`` or ``"좋아요 3,072개"`` where the
    number is surrounded by labels. Korean-unit tokens win over English-unit
    tokens, which win over plain digit runs.

    Parameters
    ----------
    text : str | None
        Text that may contain a count.

    Returns
    -------
    ParsedNumber
        The parsed count. ``matched_text`` is set only for unit-abbreviated
        tokens; a text with no positive count yields ``ParsedNumber()``.
    """
    if not text or not isinstance(text, str):
        return ParsedNumber()

    for pattern in (_KOREAN_SEARCH_RE, _ENGLISH_SEARCH_RE):
        match = pattern.search(text)
        if match:
            token = match.group(0)
            return ParsedNumber(value=parse_abbreviated_number(token), matched_text=token)

    plain_match = _PLAIN_SEARCH_RE.search(text)
    if plain_match:
        value = parse_abbreviated_number(plain_match.group(0))
        if value > 0:
            return ParsedNumber(value=value)

    return ParsedNumber()


def _one_decimal(value: float) -> str:
    formatted = f"{value:.1f}"
    return formatted[:-2] if formatted.endswith(".0") else formatted


def format_abbreviated_number(num: int, korean: bool = True) -> str:
    """
    Render a count in abbreviated display form.

    Parameters
    ----------
    num : int
        The count to render.
    korean : bool, optional
        Use 천/만/억 units instead of K/M/B (default: True).

    Returns
    -------
    str
        ``str(num)`` below 1000, otherwise one decimal place with a
        trailing ``.0`` dropped (``"15만"``, ``"1.5천"``, ``"2.3M"``).
    """
    if num < 1000:
        return str(num)

    if korean:
        if num >= 100_000_000:
            return f"{_one_decimal(num / 100_000_000)}억"
        if num >= 10_000:
            return f"{_one_decimal(num / 10_000)}만"
        return f"{_one_decimal(num / 1_000)}천"

    if num >= 1_000_000_000:
        return f"{_one_decimal(num / 1_000_000_000)}B"
    if num >= 1_000_000:
        return f"{_one_decimal(num / 1_000_000)}M"
    return f"{_one_decimal(num / 1_000)}K"
