"""
Ordered-pattern field extraction over raw HTML.

YouTube markup is unversioned and several generations of it coexist, so no
single pattern can be trusted for any field. Each logical field gets an
ordered list of candidate patterns, most specific/current markup first and
most generic fallback last. The first pattern whose capture passes the
field's validator wins and the rest are never tried.

Classes
-------
FieldPattern
    A compiled regex, the capture group to read, and an acceptance check.

Functions
---------
extract_field
    Return the first accepted, trimmed capture from an ordered pattern list.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def accept_any(value: str) -> bool:
    """Default validator: any non-empty capture is accepted."""
    return bool(value)


@dataclass(frozen=True)
class FieldPattern:
    """
    One candidate extraction pattern for a logical field.

    Attributes
    ----------
    regex : re.Pattern[str]
        Compiled pattern searched against the whole document.
    group_index : int
        Capture group holding the value; ``0`` uses the whole match.
    validate : Callable[[str], bool]
        Acceptance check applied to the trimmed capture.
    label : str
        Short name used in debug logging.
    """

    regex: re.Pattern[str]
    group_index: int = 1
    validate: Callable[[str], bool] = field(default=accept_any, compare=False)
    label: str = ""

    @classmethod
    def compile(
        cls,
        pattern: str,
        flags: int = re.IGNORECASE,
        group_index: int = 1,
        validate: Callable[[str], bool] = accept_any,
        label: str = "",
    ) -> FieldPattern:
        """
        Build a FieldPattern from a pattern string.

        Parameters
        ----------
        pattern : str
            Regular expression source.
        flags : int, optional
            ``re`` flags (default: ``re.IGNORECASE``).
        group_index : int, optional
            Capture group holding the value (default: 1).
        validate : Callable[[str], bool], optional
            Acceptance check (default: non-empty).
        label : str, optional
            Short name for logging (default: the pattern source).

        Returns
        -------
        FieldPattern
            The compiled candidate.
        """
        return cls(
            regex=re.compile(pattern, flags),
            group_index=group_index,
            validate=validate,
            label=label or pattern,
        )

    def capture(self, html: str) -> str | None:
        """Trimmed capture of this pattern in ``html``, or None."""
        match = self.regex.search(html)
        if match is None:
            return None
        try:
            group = match.group(self.group_index)
        except IndexError:
            return None
        if not group:
            return None
        return group.strip() or None


def extract_field(html: str, patterns: Sequence[FieldPattern]) -> str | None:
    """
    Return the first accepted capture from an ordered pattern list.

    Patterns are evaluated top to bottom. A pattern that does not match,
    captures nothing, or whose validator rejects (or raises on) the capture
    is skipped. Evaluation stops at the first accepted capture.

    Parameters
    ----------
    html : str
        Raw document text.
    patterns : Sequence[FieldPattern]
        Candidate patterns in priority order.

    Returns
    -------
    str | None
        The accepted, trimmed value, or None when every pattern failed.
        None means "leave the field at its default", never an error.
    """
    if not html:
        return None

    for candidate in patterns:
        value = candidate.capture(html)
        if value is None:
            continue
        try:
            accepted = candidate.validate(value)
        except Exception as e:
            logger.debug(
                "Validator for pattern %s raised %s: %s",
                candidate.label,
                type(e).__name__,
                e,
            )
            continue
        if accepted:
            logger.debug("Pattern %s accepted %r", candidate.label, value[:80])
            return value

    return None
