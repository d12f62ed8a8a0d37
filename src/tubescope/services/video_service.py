"""
Video metadata service.

Combines the oEmbed client (title, channel, thumbnails, embed HTML) with
the watch-page scraper (views, likes, duration, upload date) into one
:class:`VideoMetadata` view.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode
from tubescope.models.scraped import OEmbedData, ScrapedVideoData, VideoMetadata
from tubescope.services.scraping.oembed_client import OEmbedClient, extract_thumbnails
from tubescope.services.scraping.video_scraper import VideoPageScraper
from tubescope.utils.url_parser import extract_video_id

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def merge_video_data(
    oembed_data: OEmbedData, scraped_data: ScrapedVideoData, video_id: str
) -> VideoMetadata:
    """
    Merge oEmbed and scraped watch-page data.

    oEmbed wins for title and channel name; the scraped owner name is the
    fallback for the latter. A missing upload date becomes the current time.
    """
    return VideoMetadata(
        id=video_id,
        title=oembed_data.title or "Unknown Title",
        channel_name=oembed_data.author_name or scraped_data.channel_name or "Unknown Channel",
        description=scraped_data.description,
        thumbnails=extract_thumbnails(oembed_data),
        view_count=scraped_data.view_count,
        like_count=scraped_data.like_count,
        like_text=scraped_data.like_text,
        duration=scraped_data.duration,
        upload_date=scraped_data.upload_date or _now_iso(),
        embed_html=oembed_data.html or None,
    )


class VideoMetadataService:
    """
    High-level video lookups built on oEmbed and watch-page scraping.

    Parameters
    ----------
    oembed_client : OEmbedClient | None, optional
        oEmbed client (default: a new client on the global settings).
    page_scraper : VideoPageScraper | None, optional
        Watch-page scraper (default: a new scraper on the global settings).
    """

    def __init__(
        self,
        oembed_client: OEmbedClient | None = None,
        page_scraper: VideoPageScraper | None = None,
    ) -> None:
        self._oembed = oembed_client or OEmbedClient()
        self._scraper = page_scraper or VideoPageScraper()

    @staticmethod
    def _resolve_video_id(url_or_id: str) -> str:
        video_id = extract_video_id(url_or_id) or (url_or_id or "").strip()
        if not video_id:
            raise ScraperError(
                "Invalid YouTube URL or video ID",
                code=ScraperErrorCode.INVALID_URL,
            )
        return video_id

    async def get_video_metadata(self, url_or_id: str) -> VideoMetadata:
        """
        Full metadata for a video.

        oEmbed and the watch-page scrape run concurrently. oEmbed must
        succeed; a failed scrape only leaves the metrics at their defaults.

        Raises
        ------
        ScraperError
            ``INVALID_URL`` for empty input, or the oEmbed failure.
        """
        video_id = self._resolve_video_id(url_or_id)
        logger.info("Collecting metadata for video %s", video_id)
        started = asyncio.get_running_loop().time()

        oembed_result, scraped_result = await asyncio.gather(
            self._oembed.fetch_oembed_data(video_id),
            self._scraper.scrape_video_page(video_id),
            return_exceptions=True,
        )

        if isinstance(oembed_result, BaseException):
            raise oembed_result

        if isinstance(scraped_result, BaseException):
            logger.warning(
                "Watch page scrape failed for %s, using oEmbed data only: %s",
                video_id,
                scraped_result,
            )
            scraped_result = ScrapedVideoData()

        elapsed_ms = (asyncio.get_running_loop().time() - started) * 1000
        logger.debug("Collected metadata for %s in %.0fms", video_id, elapsed_ms)
        return merge_video_data(oembed_result, scraped_result, video_id)

    async def get_quick_video_info(self, url_or_id: str) -> VideoMetadata:
        """Basic metadata from oEmbed only; metrics are left at zero."""
        video_id = self._resolve_video_id(url_or_id)
        oembed_data = await self._oembed.fetch_oembed_data(video_id)
        return merge_video_data(oembed_data, ScrapedVideoData(), video_id)

    async def get_video_metrics(self, url_or_id: str) -> ScrapedVideoData:
        """View/like counts and upload date from the watch page only."""
        video_id = self._resolve_video_id(url_or_id)
        return await self._scraper.scrape_metrics(video_id)

    async def get_multiple_videos(
        self, urls: list[str]
    ) -> list[VideoMetadata | dict[str, Any]]:
        """
        Look up several videos concurrently.

        Returns
        -------
        list[VideoMetadata | dict[str, Any]]
            One entry per input, in input order: metadata on success, or
            ``{"error": True, "url": ..., "message": ...}`` on failure.
        """

        async def lookup(url: str) -> VideoMetadata | dict[str, Any]:
            try:
                return await self.get_video_metadata(url)
            except Exception as e:
                message = e.message if isinstance(e, ScraperError) else str(e)
                return {"error": True, "url": url, "message": message or "Unknown error"}

        return list(await asyncio.gather(*(lookup(url) for url in urls)))
