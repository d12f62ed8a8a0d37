"""
Data models module for tubescope.

Defines Pydantic models for data scraped from YouTube pages and fetched
from the comments endpoint.
"""

from __future__ import annotations

from .comment import Comment, CommentAuthor, CommentPage, CommentToken
from .enums import (
    CommentFetchMode,
    CommentSortOrder,
    FetchPlan,
    ScraperErrorCode,
    ThumbnailQuality,
    TokenStateKind,
)
from .scraped import (
    OEmbedData,
    ParsedNumber,
    ScrapedChannelData,
    ScrapedVideoData,
    VideoMetadata,
    VideoThumbnails,
)

__all__ = [
    # Comments
    "Comment",
    "CommentAuthor",
    "CommentPage",
    "CommentToken",
    # Scraped data
    "OEmbedData",
    "ParsedNumber",
    "ScrapedChannelData",
    "ScrapedVideoData",
    "VideoMetadata",
    "VideoThumbnails",
    # Enums
    "CommentFetchMode",
    "CommentSortOrder",
    "FetchPlan",
    "ScraperErrorCode",
    "ThumbnailQuality",
    "TokenStateKind",
]
