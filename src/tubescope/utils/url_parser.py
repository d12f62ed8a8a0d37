"""YouTube URL parsing and building."""

from __future__ import annotations

import re

from tubescope.models.enums import ThumbnailQuality

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

# Checked in order; the first capture is the video id.
_VIDEO_URL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtube\.com/watch\?.*&v=)([^&\n?#]+)"),
    re.compile(r"(?:youtu\.be/)([^&\n?#]+)"),
    re.compile(r"(?:youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"(?:youtube\.com/v/)([^&\n?#]+)"),
    re.compile(r"(?:youtube\.com/shorts/)([^&\n?#]+)"),
    re.compile(r"(?:m\.youtube\.com/watch\?v=)([^&\n?#]+)"),
]


def extract_video_id(url: str | None) -> str | None:
    """
    Extract the video id from a YouTube URL.

    Parameters
    ----------
    url : str | None
        A watch, short-link, embed, ``/v/``, Shorts or mobile URL, or a
        bare 11-character video id.

    Returns
    -------
    str | None
        The video id, or None when the input is not recognized.

    Examples
    --------
    >>> extract_video_id("https://youtu.be/dQw4w9WgXcQ?t=42")
    'dQw4w9WgXcQ'
    """
    if not url:
        return None

    candidate = url.strip()
    if _VIDEO_ID_RE.match(candidate):
        return candidate

    for pattern in _VIDEO_URL_PATTERNS:
        match = pattern.search(candidate)
        if match and match.group(1):
            return match.group(1)

    return None


def build_watch_url(video_id: str, base_url: str = "https://www.youtube.com") -> str:
    """Watch-page URL for a video id."""
    return f"{base_url.rstrip('/')}/watch?v={video_id}"


def build_embed_url(video_id: str) -> str:
    """Embeddable player URL for a video id."""
    return f"https://www.youtube.com/embed/{video_id}"


def build_thumbnail_url(
    video_id: str, quality: ThumbnailQuality = ThumbnailQuality.HIGH
) -> str:
    """Static thumbnail URL for a video id at the given quality."""
    return f"https://i.ytimg.com/vi/{video_id}/{quality.value}.jpg"


def is_youtube_url(url: str | None) -> bool:
    """Whether ``url`` is a YouTube video URL or a bare video id."""
    return extract_video_id(url) is not None
