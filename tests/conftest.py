"""
Pytest configuration and fixtures for tubescope tests.
"""

from __future__ import annotations

import pytest

from tubescope.config.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fast scraping and a fixed comments endpoint."""
    return Settings(
        comments_endpoint_url="https://comments.test/functions/v1/youtube-comments",
        scrape_yield_delay=0.0,
        request_timeout=5.0,
        comment_cache_ttl_seconds=600,
    )


@pytest.fixture
def sample_oembed_payload() -> dict:
    """oEmbed response body for a typical video."""
    return {
        "title": "Never Gonna Give You Up",
        "author_name": "Rick Astley",
        "author_url": "https://www.youtube.com/@RickAstleyYT",
        "type": "video",
        "height": 113,
        "width": 200,
        "version": "1.0",
        "provider_name": "YouTube",
        "provider_url": "https://www.youtube.com/",
        "thumbnail_height": 360,
        "thumbnail_width": 480,
        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "html": '<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>',
    }
