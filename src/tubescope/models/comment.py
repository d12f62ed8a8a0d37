"""
Pydantic models for the comments endpoint.

The endpoint speaks camelCase JSON; every model accepts both the camelCase
aliases and the snake_case field names.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def _non_negative_int(v: Any) -> int:
    """Coerce an inbound count to a non-negative int, 0 on anything odd."""
    if isinstance(v, bool):
        return 0
    try:
        number = int(v)
    except (TypeError, ValueError):
        return 0
    return max(number, 0)


class CommentAuthor(BaseModel):
    """Comment author as reported by the comments endpoint."""

    model_config = _CAMEL_CONFIG

    name: str = ""
    profile_image_url: str = ""
    channel_id: str | None = None


class Comment(BaseModel):
    """
    A single top-level comment.

    Attributes
    ----------
    id : str
        Comment identifier.
    content : str
        Comment text.
    author : CommentAuthor
        Comment author.
    like_count : int
        Like count, never negative.
    like_count_text : str | None
        Abbreviated like count as displayed (e.g. ``"1.2천"``).
    published_time_text : str
        Relative publish time as displayed (e.g. ``"3일 전"``).
    reply_count : int
        Number of replies, never negative.
    is_hearted : bool
        Whether the channel owner hearted the comment.
    is_pinned : bool
        Whether the comment is pinned.
    """

    model_config = _CAMEL_CONFIG

    id: str
    content: str = ""
    author: CommentAuthor = Field(default_factory=CommentAuthor)
    like_count: int = 0
    like_count_text: str | None = None
    published_time_text: str = ""
    reply_count: int = 0
    is_hearted: bool = False
    is_pinned: bool = False

    @field_validator("like_count", "reply_count", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> int:
        """Counts are non-negative integers; parse failures become 0."""
        return _non_negative_int(v)


class CommentToken(BaseModel):
    """
    Result of the token prefetch phase.

    Attributes
    ----------
    token : str | None
        Continuation token, or None when the endpoint could not derive one.
    total_count_text : str | None
        Total comment count as displayed (e.g. ``"댓글 1,234개"``).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    token: str | None = None
    total_count_text: str | None = None

    @field_validator("token", mode="before")
    @classmethod
    def empty_token_is_none(cls, v: Any) -> str | None:
        """An empty token is as good as no token."""
        return v or None


class CommentPage(BaseModel):
    """One page of comments plus listing-level facts."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    comments: list[Comment] = Field(default_factory=list)
    total_count_text: str | None = None
    has_more: bool = False
