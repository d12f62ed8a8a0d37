"""
Enums for tubescope models.

Defines enumeration types used across the application for consistent
type safety and validation.
"""

from __future__ import annotations

from enum import Enum


class ScraperErrorCode(str, Enum):
    """Machine-readable codes carried by request-level scraper errors."""

    VIDEO_NOT_FOUND = "VIDEO_NOT_FOUND"
    CHANNEL_NOT_FOUND = "CHANNEL_NOT_FOUND"
    INVALID_URL = "INVALID_URL"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"


class CommentSortOrder(str, Enum):
    """Comment listing order."""

    TOP = "TOP"
    NEWEST = "NEWEST"


class CommentFetchMode(str, Enum):
    """Values of the ``mode`` query parameter on the comments endpoint."""

    TOKEN = "token"
    COMMENTS = "comments"
    FULL = "full"  # no mode parameter sent


class TokenStateKind(str, Enum):
    """Lifecycle of a prefetched continuation token."""

    PENDING = "pending"
    READY_WITH_TOKEN = "ready_with_token"
    READY_WITHOUT_TOKEN = "ready_without_token"


class FetchPlan(str, Enum):
    """Which comment request to issue for a given token state."""

    WAIT = "wait"
    USE_TOKEN = "use_token"
    FALLBACK = "fallback"


class ThumbnailQuality(str, Enum):
    """YouTube thumbnail variants, valued by their file stem."""

    DEFAULT = "default"  # 120x90
    MEDIUM = "mqdefault"  # 320x180
    HIGH = "hqdefault"  # 480x360
    STANDARD = "sddefault"  # 640x480
    MAXRES = "maxresdefault"  # 1280x720
