"""
Locate and decode JavaScript-assigned JSON blobs in YouTube page source.

Watch and channel pages embed ``ytInitialData`` (and friends) as
``var ytInitialData = {...};``. A non-greedy regex cannot find the end of
such a deeply nested object, so the body is cut out by brace counting.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

YT_INITIAL_DATA_RE = re.compile(r'(?:var\s+|window\["|)ytInitialData(?:"\])?\s*=\s*')
YT_INITIAL_PLAYER_RE = re.compile(
    r'(?:var\s+|window\["|)ytInitialPlayerResponse(?:"\])?\s*=\s*',
)

_MAX_SCAN_CHARS = 5_000_000

# One token per match: a whole double-quoted string (escapes included), a
# brace, or a stray quote that opens a string never closed.
_SCAN_TOKEN_RE = re.compile(r'"[^"\\]*(?:\\.[^"\\]*)*"|[{}"]', re.DOTALL)


def extract_json_object(html: str, start: int) -> str | None:
    """
    Cut the object literal that opens at ``html[start]`` out of a page.

    Strings are consumed whole by the tokenizer, so braces and escaped
    quotes inside them never affect the nesting depth.

    Parameters
    ----------
    html : str
        Page source.
    start : int
        Index of the ``{`` that opens the object.

    Returns
    -------
    str | None
        The object text including both braces. None when ``html[start]`` is
        not ``{``, when a string is left open, or when the object does not
        close within ``_MAX_SCAN_CHARS`` characters.
    """
    if start >= len(html) or html[start] != "{":
        return None

    depth = 0
    for token in _SCAN_TOKEN_RE.finditer(html, start, start + _MAX_SCAN_CHARS):
        kind = token.group(0)
        if kind == "{":
            depth += 1
        elif kind == "}":
            depth -= 1
            if depth == 0:
                return html[start : token.end()]
        elif kind == '"':
            return None
    return None


def find_assigned_json(html: str, assignment: re.Pattern[str]) -> dict[str, Any] | None:
    """
    Decode the object literal assigned by ``assignment`` in ``html``.

    Parameters
    ----------
    html : str
        Raw HTML source.
    assignment : re.Pattern[str]
        Pattern matching the assignment prefix up to the ``=`` and spaces,
        e.g. :data:`YT_INITIAL_DATA_RE`.

    Returns
    -------
    dict[str, Any] | None
        The decoded object, or None when it is missing or malformed.
    """
    match = assignment.search(html)
    if not match:
        return None

    json_str = extract_json_object(html, match.end())
    if json_str is None:
        return None

    try:
        data = json.loads(json_str)
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug("Embedded JSON at offset %d is malformed: %s", match.end(), e)
        return None

    return data if isinstance(data, dict) else None


def dig(data: Any, *path: str | int) -> Any:
    """
    Walk nested dicts/lists, returning None at the first missing step.

    Examples
    --------
    >>> dig({"a": [{"b": 1}]}, "a", 0, "b")
    1
    >>> dig({"a": []}, "a", 0, "b") is None
    True
    """
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current
