"""
Tests for shared page-fetch plumbing.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tubescope.config.settings import Settings
from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode
from tubescope.services.scraping.http import build_page_headers, fetch_text

URL = "https://www.youtube.com/@example"


class TestBuildPageHeaders:
    """Tests for build_page_headers."""

    def test_consent_headers(self, test_settings: Settings) -> None:
        """Consent mode sends the cookie, fetch metadata and no compression."""
        headers = build_page_headers(test_settings)

        assert headers["User-Agent"] == test_settings.user_agent
        assert headers["Accept-Language"].startswith("ko-KR")
        assert headers["Cookie"] == test_settings.consent_cookie
        assert headers["Accept-Encoding"] == "identity"
        assert headers["Sec-Fetch-Mode"] == "navigate"

    def test_plain_headers(self, test_settings: Settings) -> None:
        """Without consent only the browser basics are sent."""
        headers = build_page_headers(test_settings, consent=False)

        assert set(headers) == {"User-Agent", "Accept", "Accept-Language"}


class TestFetchText:
    """Tests for fetch_text error mapping."""

    async def test_returns_body(self) -> None:
        """A 2xx response returns the body text."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(200, text="<html>ok</html>")

            body = await fetch_text(
                URL,
                resource="channel @example",
                not_found_code=ScraperErrorCode.CHANNEL_NOT_FOUND,
                params={"hl": "ko"},
                timeout=5.0,
            )

        assert body == "<html>ok</html>"
        assert mock_get.call_args.args[0] == URL
        assert mock_get.call_args.kwargs["params"] == {"hl": "ko"}
        assert mock_get.call_args.kwargs["timeout"] == 5.0

    @pytest.mark.parametrize(
        "status,code,retryable",
        [
            (404, ScraperErrorCode.CHANNEL_NOT_FOUND, False),
            (429, ScraperErrorCode.API_ERROR, True),
            (403, ScraperErrorCode.API_ERROR, False),
            (503, ScraperErrorCode.API_ERROR, True),
        ],
    )
    async def test_status_mapping(
        self, status: int, code: ScraperErrorCode, retryable: bool
    ) -> None:
        """Non-2xx statuses map onto error codes."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(status, text="error")

            with pytest.raises(ScraperError) as exc_info:
                await fetch_text(
                    URL,
                    resource="channel @example",
                    not_found_code=ScraperErrorCode.CHANNEL_NOT_FOUND,
                )

        assert exc_info.value.code is code
        assert exc_info.value.retryable is retryable
        assert exc_info.value.status_code == status

    async def test_transport_error(self) -> None:
        """Transport failures become retryable NETWORK_ERROR."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = httpx.ConnectError("connection refused")

            with pytest.raises(ScraperError) as exc_info:
                await fetch_text(
                    URL,
                    resource="channel @example",
                    not_found_code=ScraperErrorCode.CHANNEL_NOT_FOUND,
                )

        assert exc_info.value.code is ScraperErrorCode.NETWORK_ERROR
        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
