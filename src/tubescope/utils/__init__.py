"""Utility modules for tubescope."""

from tubescope.utils.duration import (
    format_seconds,
    iso8601_to_seconds,
    parse_iso8601_duration,
)
from tubescope.utils.numbers import (
    format_abbreviated_number,
    parse_abbreviated_number,
    parse_count_text,
)
from tubescope.utils.relative_time import format_relative_time
from tubescope.utils.url_parser import (
    build_embed_url,
    build_thumbnail_url,
    build_watch_url,
    extract_video_id,
    is_youtube_url,
)

__all__ = [
    "build_embed_url",
    "build_thumbnail_url",
    "build_watch_url",
    "extract_video_id",
    "format_abbreviated_number",
    "format_relative_time",
    "format_seconds",
    "is_youtube_url",
    "iso8601_to_seconds",
    "parse_abbreviated_number",
    "parse_count_text",
    "parse_iso8601_duration",
]
