"""
Tests for the comments endpoint client.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tubescope.config.settings import Settings
from tubescope.exceptions import CommentFetchError, ScraperError
from tubescope.models.enums import CommentSortOrder, ScraperErrorCode
from tubescope.services.comments.client import CommentClient

pytestmark = pytest.mark.asyncio

VIDEO_ID = "dQw4w9WgXcQ"

RAW_COMMENT = {
    "id": "Ugx123",
    "content": "명곡입니다",
    "author": {
        "name": "@listener",
        "profileImageUrl": "https://yt3.ggpht.com/a.jpg",
        "channelId": "UCabc",
    },
    "likeCount": 1200,
    "likeCountText": "1.2천",
    "publishedTimeText": "3일 전",
    "replyCount": 4,
    "isHearted": True,
    "isPinned": False,
}


@pytest.fixture
def client(test_settings: Settings) -> CommentClient:
    """Client pointed at the test endpoint."""
    return CommentClient(app_settings=test_settings)


class TestPrefetchToken:
    """Tests for CommentClient.prefetch_token."""

    async def test_requests_token_mode(self, client: CommentClient, test_settings: Settings) -> None:
        """Phase 1 sends videoId and mode=token."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(
                200, json={"token": "CONT_TOKEN", "totalCountText": "댓글 1,234개"}
            )

            token = await client.prefetch_token(VIDEO_ID)

        assert token.token == "CONT_TOKEN"
        assert token.total_count_text == "댓글 1,234개"
        call = mock_get.call_args
        assert call.args[0] == test_settings.comments_endpoint_url
        assert call.kwargs["params"] == {"videoId": VIDEO_ID, "mode": "token"}

    async def test_missing_token_is_none(self, client: CommentClient) -> None:
        """An empty token is reported as None."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(200, json={"token": ""})

            token = await client.prefetch_token(VIDEO_ID)

        assert token.token is None
        assert token.total_count_text is None


class TestGetComments:
    """Tests for the two Phase 2 requests."""

    async def test_with_token_sends_only_token(self, client: CommentClient) -> None:
        """The token path sends token and mode=comments, no videoId."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(
                200, json={"comments": [RAW_COMMENT], "hasMore": True}
            )

            page = await client.get_comments_with_token("CONT_TOKEN", "댓글 1,234개")

        params = mock_get.call_args.kwargs["params"]
        assert params == {"token": "CONT_TOKEN", "mode": "comments"}
        assert "videoId" not in params
        assert page.total_count_text == "댓글 1,234개"
        assert page.has_more is True

        comment = page.comments[0]
        assert comment.id == "Ugx123"
        assert comment.author.profile_image_url == "https://yt3.ggpht.com/a.jpg"
        assert comment.like_count == 1200
        assert comment.like_count_text == "1.2천"
        assert comment.is_hearted is True

    async def test_full_lookup_sends_only_video_id(self, client: CommentClient) -> None:
        """The full path sends videoId alone; the sort order is not sent."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(
                200, json={"comments": [RAW_COMMENT], "totalCountText": "댓글 9개"}
            )

            page = await client.get_comments(VIDEO_ID, CommentSortOrder.NEWEST)

        assert mock_get.call_args.kwargs["params"] == {"videoId": VIDEO_ID}
        assert page.total_count_text == "댓글 9개"
        assert page.has_more is False
        assert len(page.comments) == 1

    async def test_malformed_comments_are_skipped(self, client: CommentClient) -> None:
        """Entries without an id are dropped; odd counts become 0."""
        raw = [{"content": "no id"}, {"id": "ok", "likeCount": -3, "replyCount": "n/a"}]
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(200, json={"comments": raw})

            page = await client.get_comments(VIDEO_ID)

        assert [c.id for c in page.comments] == ["ok"]
        assert page.comments[0].like_count == 0
        assert page.comments[0].reply_count == 0


class TestErrors:
    """Tests for error mapping."""

    async def test_server_error_message(self, client: CommentClient) -> None:
        """The server-provided error text becomes the message."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(
                400, json={"error": "Comments are disabled for this video"}
            )

            with pytest.raises(CommentFetchError) as exc_info:
                await client.get_comments(VIDEO_ID)

        error = exc_info.value
        assert error.message == "Comments are disabled for this video"
        assert str(error) == "Comments are disabled for this video"
        assert error.status_code == 400
        assert error.code is ScraperErrorCode.API_ERROR
        assert error.retryable is False

    async def test_generic_http_message(self, client: CommentClient) -> None:
        """Without a server message the text is ``HTTP <status>``."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(500, text="Internal Server Error")

            with pytest.raises(CommentFetchError) as exc_info:
                await client.prefetch_token(VIDEO_ID)

        assert exc_info.value.message == "HTTP 500"
        assert exc_info.value.status_code == 500
        assert exc_info.value.retryable is True

    async def test_transport_error(self, client: CommentClient) -> None:
        """Transport failures raise a retryable NETWORK_ERROR."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = httpx.ReadTimeout("timed out")

            with pytest.raises(CommentFetchError) as exc_info:
                await client.get_comments_with_token("CONT_TOKEN")

        assert exc_info.value.code is ScraperErrorCode.NETWORK_ERROR
        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value, ScraperError)

    async def test_non_object_body(self, client: CommentClient) -> None:
        """A JSON body that is not an object raises PARSING_ERROR."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(200, json=["not", "an", "object"])

            with pytest.raises(CommentFetchError) as exc_info:
                await client.get_comments(VIDEO_ID)

        assert exc_info.value.code is ScraperErrorCode.PARSING_ERROR

    @pytest.mark.parametrize(
        "payload",
        [{"token": 123}, {"token": "T", "totalCountText": 100}],
    )
    async def test_wrongly_typed_token_payload(
        self, client: CommentClient, payload: dict[str, object]
    ) -> None:
        """A token response with wrongly typed fields raises PARSING_ERROR."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(200, json=payload)

            with pytest.raises(CommentFetchError) as exc_info:
                await client.prefetch_token(VIDEO_ID)

        assert exc_info.value.code is ScraperErrorCode.PARSING_ERROR

    async def test_wrongly_typed_comment_page(self, client: CommentClient) -> None:
        """A comment page with a non-string total count raises PARSING_ERROR."""
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = httpx.Response(
                200, json={"comments": [RAW_COMMENT], "totalCountText": 7}
            )

            with pytest.raises(CommentFetchError) as exc_info:
                await client.get_comments(VIDEO_ID)

        assert exc_info.value.code is ScraperErrorCode.PARSING_ERROR
