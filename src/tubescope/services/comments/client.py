"""
Comments endpoint client.

The comments backend exposes one endpoint whose behaviour is selected by a
``mode`` query parameter:

- ``?videoId=<id>&mode=token`` returns only a continuation token and the
  total-count text (cheap, meant to be issued early).
- ``?token=<token>&mode=comments`` returns the comment page for a token.
- ``?videoId=<id>`` runs the whole lookup (token derivation plus comment
  fetch) in one request.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from tubescope.config.settings import Settings, settings
from tubescope.exceptions import CommentFetchError
from tubescope.models.comment import Comment, CommentPage, CommentToken
from tubescope.models.enums import CommentFetchMode, CommentSortOrder, ScraperErrorCode

logger = logging.getLogger(__name__)


def _parse_comments(raw_comments: Any) -> list[Comment]:
    if not isinstance(raw_comments, list):
        return []
    comments: list[Comment] = []
    for raw in raw_comments:
        try:
            comments.append(Comment.model_validate(raw))
        except ValidationError as e:
            logger.debug("Skipping malformed comment: %s", e.errors()[:1])
    return comments


def _malformed_payload(error: ValidationError) -> CommentFetchError:
    logger.warning("Comments endpoint payload failed validation: %s", error.errors()[:1])
    return CommentFetchError(
        "Comments endpoint returned a malformed payload",
        code=ScraperErrorCode.PARSING_ERROR,
    )


class CommentClient:
    """
    Async client for the comments endpoint.

    Parameters
    ----------
    endpoint_url : str | None, optional
        Comments endpoint (default: ``settings.comments_endpoint_url``).
    timeout : float | None, optional
        Transport timeout in seconds (default: ``settings.request_timeout``).
    app_settings : Settings | None, optional
        Configuration source (default: the global settings).

    Examples
    --------
    >>> client = CommentClient()
    >>> token = await client.prefetch_token("dQw4w9WgXcQ")
    >>> page = await client.get_comments_with_token(token.token, token.total_count_text)
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        timeout: float | None = None,
        app_settings: Settings | None = None,
    ) -> None:
        app_settings = app_settings or settings
        self.endpoint_url = (endpoint_url or app_settings.comments_endpoint_url).rstrip("/")
        self.timeout = app_settings.request_timeout if timeout is None else timeout

    async def _request(self, params: dict[str, str]) -> dict[str, Any]:
        """
        GET the endpoint with ``params`` and return the decoded JSON object.

        Raises
        ------
        CommentFetchError
            ``API_ERROR`` carrying the server ``error`` message (or
            ``HTTP <status>``) for non-2xx responses, ``NETWORK_ERROR`` for
            transport failures, ``PARSING_ERROR`` for a non-object body.
        """
        try:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(
                    self.endpoint_url,
                    params=params,
                    timeout=self.timeout,
                )
        except httpx.TransportError as e:
            raise CommentFetchError(
                f"Network error calling comments endpoint: {type(e).__name__}",
                code=ScraperErrorCode.NETWORK_ERROR,
                retryable=True,
            ) from e

        status = response.status_code
        if not 200 <= status < 300:
            try:
                error_body = response.json()
            except ValueError:
                error_body = {}
            server_message = error_body.get("error") if isinstance(error_body, dict) else None
            raise CommentFetchError(
                str(server_message) if server_message else f"HTTP {status}",
                status_code=status,
                retryable=status >= 500,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CommentFetchError(
                "Comments endpoint returned a non-JSON body",
                status_code=status,
                code=ScraperErrorCode.PARSING_ERROR,
            ) from e

        if not isinstance(data, dict):
            raise CommentFetchError(
                "Comments endpoint returned an unexpected payload",
                status_code=status,
                code=ScraperErrorCode.PARSING_ERROR,
            )
        return data

    async def prefetch_token(self, video_id: str) -> CommentToken:
        """
        Phase 1: fetch only the continuation token for a video.

        Parameters
        ----------
        video_id : str
            YouTube video id.

        Returns
        -------
        CommentToken
            Token (None when the backend could not derive one) and the
            total-count text.
        """
        logger.debug("Prefetching comment token for %s", video_id)
        try:
            data = await self._request(
                {"videoId": video_id, "mode": CommentFetchMode.TOKEN.value}
            )
        except CommentFetchError as e:
            logger.warning("Comment token prefetch failed for %s: %s", video_id, e.message)
            raise

        try:
            token = CommentToken(
                token=data.get("token") or None,
                total_count_text=data.get("totalCountText"),
            )
        except ValidationError as e:
            raise _malformed_payload(e) from e
        logger.debug("Comment token prefetch for %s done, token=%s", video_id, bool(token.token))
        return token

    async def get_comments_with_token(
        self, token: str, total_count_text: str | None = None
    ) -> CommentPage:
        """
        Phase 2, cheap path: fetch the comment page for a continuation token.

        Parameters
        ----------
        token : str
            Continuation token from :meth:`prefetch_token`.
        total_count_text : str | None, optional
            Total-count text from the prefetch; the token response does not
            carry it, so it is passed through into the page.

        Returns
        -------
        CommentPage
            The comments.
        """
        try:
            data = await self._request(
                {"token": token, "mode": CommentFetchMode.COMMENTS.value}
            )
        except CommentFetchError as e:
            logger.warning("Comment fetch by token failed: %s", e.message)
            raise

        comments = _parse_comments(data.get("comments"))
        logger.debug("Fetched %d comments by token", len(comments))
        try:
            return CommentPage(
                comments=comments,
                total_count_text=total_count_text,
                has_more=bool(data.get("hasMore", False)),
            )
        except ValidationError as e:
            raise _malformed_payload(e) from e

    async def get_comments(
        self,
        video_id: str,
        sort_by: CommentSortOrder = CommentSortOrder.TOP,
    ) -> CommentPage:
        """
        Phase 2, full path: derive the token and fetch comments in one call.

        Parameters
        ----------
        video_id : str
            YouTube video id.
        sort_by : CommentSortOrder, optional
            Requested order (default: TOP). The endpoint has no sort
            parameter, so this only labels the request in logs.

        Returns
        -------
        CommentPage
            The comments with the total-count text.
        """
        logger.debug("Fetching comments for %s (%s) without token", video_id, sort_by.value)
        try:
            data = await self._request({"videoId": video_id})
        except CommentFetchError as e:
            logger.warning("Comment fetch failed for %s: %s", video_id, e.message)
            raise

        comments = _parse_comments(data.get("comments"))
        logger.debug("Fetched %d comments for %s", len(comments), video_id)
        try:
            return CommentPage(
                comments=comments,
                total_count_text=data.get("totalCountText"),
                has_more=bool(data.get("hasMore", False)),
            )
        except ValidationError as e:
            raise _malformed_payload(e) from e
