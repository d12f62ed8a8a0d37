"""
YouTube oEmbed client.

The oEmbed endpoint is the cheapest reliable source of a video's title,
channel name, thumbnail and embed HTML.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from tubescope.config.settings import Settings, settings
from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode, ThumbnailQuality
from tubescope.models.scraped import OEmbedData, VideoThumbnails
from tubescope.services.scraping.http import fetch_text
from tubescope.utils.url_parser import build_watch_url

logger = logging.getLogger(__name__)

_THUMBNAIL_FILE_RE = re.compile(r"/[^/]+\.jpg$")


def extract_thumbnails(oembed_data: OEmbedData) -> VideoThumbnails:
    """
    Derive every standard thumbnail variant from the oEmbed thumbnail URL.

    ``https://i.ytimg.com/vi/<id>/hqdefault.jpg`` becomes the same
    directory with ``default``, ``mqdefault``, ``hqdefault``,
    ``sddefault`` and ``maxresdefault`` file names.

    Parameters
    ----------
    oembed_data : OEmbedData
        oEmbed response for the video.

    Returns
    -------
    VideoThumbnails
        Thumbnail URLs, all empty when the response had no thumbnail.
    """
    thumbnail_url = oembed_data.thumbnail_url
    if not thumbnail_url:
        return VideoThumbnails()

    base_url = _THUMBNAIL_FILE_RE.sub("", thumbnail_url)
    return VideoThumbnails(
        default=f"{base_url}/{ThumbnailQuality.DEFAULT.value}.jpg",
        medium=f"{base_url}/{ThumbnailQuality.MEDIUM.value}.jpg",
        high=f"{base_url}/{ThumbnailQuality.HIGH.value}.jpg",
        standard=f"{base_url}/{ThumbnailQuality.STANDARD.value}.jpg",
        maxres=f"{base_url}/{ThumbnailQuality.MAXRES.value}.jpg",
    )


class OEmbedClient:
    """
    Async client for ``https://www.youtube.com/oembed``.

    Parameters
    ----------
    app_settings : Settings | None, optional
        Configuration source (default: the global settings).
    """

    def __init__(self, app_settings: Settings | None = None) -> None:
        self._settings = app_settings or settings

    async def fetch_oembed_data(self, video_id: str) -> OEmbedData:
        """
        Fetch oEmbed data for a video.

        Parameters
        ----------
        video_id : str
            YouTube video id.

        Returns
        -------
        OEmbedData
            Parsed oEmbed response.

        Raises
        ------
        ScraperError
            ``VIDEO_NOT_FOUND`` on HTTP 404, retryable ``API_ERROR`` on
            other non-2xx statuses, retryable ``NETWORK_ERROR`` on
            transport failure, ``PARSING_ERROR`` on a malformed body.
        """
        try:
            body = await fetch_text(
                self._settings.oembed_url,
                resource=f"oEmbed for video {video_id}",
                not_found_code=ScraperErrorCode.VIDEO_NOT_FOUND,
                params={"url": build_watch_url(video_id), "format": "json"},
                timeout=self._settings.request_timeout,
            )
        except ScraperError as e:
            if e.code is ScraperErrorCode.API_ERROR:
                e.retryable = True
            raise

        try:
            data = OEmbedData.model_validate(json.loads(body))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ScraperError(
                f"Malformed oEmbed response for video {video_id}",
                code=ScraperErrorCode.PARSING_ERROR,
            ) from e

        logger.debug("oEmbed for %s: title=%r author=%r", video_id, data.title, data.author_name)
        return data
