"""
Tests for the video metadata service.

The oEmbed client and watch-page scraper are replaced with AsyncMocks.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode
from tubescope.models.scraped import OEmbedData, ScrapedVideoData, VideoMetadata
from tubescope.services.scraping.oembed_client import OEmbedClient
from tubescope.services.scraping.video_scraper import VideoPageScraper
from tubescope.services.video_service import VideoMetadataService, merge_video_data

pytestmark = pytest.mark.asyncio

VIDEO_ID = "dQw4w9WgXcQ"


@pytest.fixture
def oembed_data(sample_oembed_payload: dict) -> OEmbedData:
    """Parsed oEmbed response."""
    return OEmbedData.model_validate(sample_oembed_payload)


@pytest.fixture
def scraped_data() -> ScrapedVideoData:
    """Scraped watch-page metrics."""
    return ScrapedVideoData(
        view_count=1_500_000_000,
        like_count=15000,
        like_text="1.5만",
        upload_date="2009-10-25T06:57:33Z",
        duration="3:32",
        description="The official video",
        channel_name="Rick Astley (page)",
    )


@pytest.fixture
def mock_oembed(oembed_data: OEmbedData) -> MagicMock:
    """oEmbed client returning ``oembed_data``."""
    client = MagicMock(spec=OEmbedClient)
    client.fetch_oembed_data = AsyncMock(return_value=oembed_data)
    return client


@pytest.fixture
def mock_scraper(scraped_data: ScrapedVideoData) -> MagicMock:
    """Watch-page scraper returning ``scraped_data``."""
    scraper = MagicMock(spec=VideoPageScraper)
    scraper.scrape_video_page = AsyncMock(return_value=scraped_data)
    scraper.scrape_metrics = AsyncMock(return_value=scraped_data)
    return scraper


@pytest.fixture
def service(mock_oembed: MagicMock, mock_scraper: MagicMock) -> VideoMetadataService:
    """Service wired to the mocks."""
    return VideoMetadataService(oembed_client=mock_oembed, page_scraper=mock_scraper)


class TestMergeVideoData:
    """Tests for merge_video_data."""

    async def test_oembed_wins_for_title_and_channel(
        self, oembed_data: OEmbedData, scraped_data: ScrapedVideoData
    ) -> None:
        """Title and channel come from oEmbed, metrics from the page."""
        merged = merge_video_data(oembed_data, scraped_data, VIDEO_ID)

        assert merged.title == "Never Gonna Give You Up"
        assert merged.channel_name == "Rick Astley"
        assert merged.view_count == 1_500_000_000
        assert merged.like_text == "1.5만"
        assert merged.thumbnails.maxres.endswith("/maxresdefault.jpg")
        assert merged.embed_html.startswith("<iframe")

    async def test_fallbacks(self) -> None:
        """Missing oEmbed fields fall back; missing upload date becomes now."""
        merged = merge_video_data(
            OEmbedData(), ScrapedVideoData(channel_name="Page Owner"), VIDEO_ID
        )

        assert merged.title == "Unknown Title"
        assert merged.channel_name == "Page Owner"
        assert merged.embed_html is None
        assert merged.upload_date.endswith("Z")

    async def test_missing_counts_coerced(self) -> None:
        """None counts become 0."""
        metadata = VideoMetadata(
            id=VIDEO_ID, title="t", channel_name="c", view_count=None, like_count=None
        )
        assert metadata.view_count == 0
        assert metadata.like_count == 0


class TestGetVideoMetadata:
    """Tests for VideoMetadataService.get_video_metadata."""

    async def test_combines_sources(
        self, service: VideoMetadataService, mock_oembed: MagicMock, mock_scraper: MagicMock
    ) -> None:
        """Both sources are queried with the id extracted from the URL."""
        metadata = await service.get_video_metadata(f"https://youtu.be/{VIDEO_ID}")

        assert metadata.id == VIDEO_ID
        assert metadata.duration == "3:32"
        mock_oembed.fetch_oembed_data.assert_awaited_once_with(VIDEO_ID)
        mock_scraper.scrape_video_page.assert_awaited_once_with(VIDEO_ID)

    async def test_scrape_failure_uses_oembed_only(
        self, service: VideoMetadataService, mock_scraper: MagicMock
    ) -> None:
        """A failed scrape leaves metrics at defaults."""
        mock_scraper.scrape_video_page.side_effect = ScraperError(
            "blocked", code=ScraperErrorCode.API_ERROR
        )

        metadata = await service.get_video_metadata(VIDEO_ID)

        assert metadata.title == "Never Gonna Give You Up"
        assert metadata.view_count == 0
        assert metadata.duration == "0:00"

    async def test_oembed_failure_raises(
        self, service: VideoMetadataService, mock_oembed: MagicMock
    ) -> None:
        """oEmbed failures propagate unchanged."""
        mock_oembed.fetch_oembed_data.side_effect = ScraperError(
            "Not found", code=ScraperErrorCode.VIDEO_NOT_FOUND
        )

        with pytest.raises(ScraperError) as exc_info:
            await service.get_video_metadata(VIDEO_ID)

        assert exc_info.value.code is ScraperErrorCode.VIDEO_NOT_FOUND

    async def test_empty_input(self, service: VideoMetadataService) -> None:
        """Empty input raises INVALID_URL."""
        with pytest.raises(ScraperError) as exc_info:
            await service.get_video_metadata("   ")

        assert exc_info.value.code is ScraperErrorCode.INVALID_URL


class TestOtherLookups:
    """Tests for the narrower lookups."""

    async def test_quick_info_skips_scrape(
        self, service: VideoMetadataService, mock_scraper: MagicMock
    ) -> None:
        """Quick info uses oEmbed only."""
        metadata = await service.get_quick_video_info(VIDEO_ID)

        assert metadata.view_count == 0
        mock_scraper.scrape_video_page.assert_not_awaited()

    async def test_metrics_skip_oembed(
        self, service: VideoMetadataService, mock_oembed: MagicMock
    ) -> None:
        """Metrics use the watch page only."""
        metrics = await service.get_video_metrics(VIDEO_ID)

        assert metrics.like_count == 15000
        mock_oembed.fetch_oembed_data.assert_not_awaited()

    async def test_multiple_videos_reports_errors_in_place(
        self, service: VideoMetadataService, mock_oembed: MagicMock, oembed_data: OEmbedData
    ) -> None:
        """Failures become error entries at their input position."""
        mock_oembed.fetch_oembed_data.side_effect = [
            oembed_data,
            ScraperError("Not found: video", code=ScraperErrorCode.VIDEO_NOT_FOUND),
        ]

        results = await service.get_multiple_videos([VIDEO_ID, "aaaaaaaaaaa"])

        assert isinstance(results[0], VideoMetadata)
        assert results[1] == {
            "error": True,
            "url": "aaaaaaaaaaa",
            "message": "Not found: video",
        }
