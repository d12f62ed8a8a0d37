"""
Pydantic models for data extracted from YouTube pages and the oEmbed API.

Models
------
ParsedNumber
    Integer recovered from abbreviated count text ("1.5만", "3.2K").
ScrapedChannelData
    Channel facts pulled out of a channel page, filled field by field.
ScrapedVideoData
    Metrics and metadata pulled out of a watch page.
OEmbedData
    Response body of the YouTube oEmbed endpoint.
VideoThumbnails
    Thumbnail URLs in the standard quality variants.
VideoMetadata
    Merged view of oEmbed data and scraped watch-page data.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ParsedNumber(BaseModel):
    """
    Integer recovered from locale-abbreviated count text.

    Attributes
    ----------
    value : int
        Parsed count, never negative. Parse failures produce 0.
    matched_text : str | None
        The abbreviated token the value came from (e.g. ``"15만"``), only
        set when a unit suffix was present.
    """

    model_config = ConfigDict(frozen=True)

    value: int = Field(default=0, ge=0)
    matched_text: str | None = None


class ScrapedChannelData(BaseModel):
    """
    Channel facts extracted from a channel page.

    Every field starts at its empty default and is overwritten only when
    the corresponding extraction step finds an accepted value.

    Attributes
    ----------
    name : str
        Channel display name.
    description : str
        Channel description with escapes restored and whitespace collapsed.
    subscriber_count : int
        Subscriber count, 0 when not found.
    subscriber_text : str | None
        Abbreviated subscriber text as shown on the page (e.g. ``"15만"``).
    avatar_url : str
        Channel avatar image URL.
    banner_url : str | None
        Channel banner image URL.
    video_count : int | None
        Number of uploaded videos.
    """

    name: str = ""
    description: str = ""
    subscriber_count: int = Field(default=0, ge=0)
    subscriber_text: str | None = None
    avatar_url: str = ""
    banner_url: str | None = None
    video_count: int | None = Field(default=None, ge=0)


class ScrapedVideoData(BaseModel):
    """Metrics and metadata extracted from a watch page."""

    view_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    like_text: str | None = None
    upload_date: str = ""
    duration: str = "0:00"
    description: str | None = None
    channel_name: str | None = None


class OEmbedData(BaseModel):
    """Response body of ``https://www.youtube.com/oembed``."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    author_name: str = ""
    author_url: str = ""
    type: str = "video"
    height: int | None = None
    width: int | None = None
    version: str = "1.0"
    provider_name: str = "YouTube"
    provider_url: str = "https://www.youtube.com/"
    thumbnail_height: int | None = None
    thumbnail_width: int | None = None
    thumbnail_url: str = ""
    html: str = ""


class VideoThumbnails(BaseModel):
    """Thumbnail URLs keyed by quality; empty strings when unknown."""

    default: str = ""
    medium: str = ""
    high: str = ""
    standard: str = ""
    maxres: str = ""


class VideoMetadata(BaseModel):
    """Merged oEmbed and watch-page view of a single video."""

    id: str
    title: str
    channel_name: str
    description: str | None = None
    thumbnails: VideoThumbnails = Field(default_factory=VideoThumbnails)
    view_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    like_text: str | None = None
    duration: str = "0:00"
    upload_date: str = ""
    embed_html: str | None = None

    @field_validator("view_count", "like_count", mode="before")
    @classmethod
    def coerce_missing_count(cls, v: int | None) -> int:
        """Missing counts from a failed scrape become 0."""
        return v or 0
