"""
Custom exceptions for the tubescope application.

This module defines the request-level error types raised by the scrapers
and the comment client. Field-level extraction failures never raise; they
leave the affected field at its default value.
"""

from __future__ import annotations

from tubescope.models.enums import ScraperErrorCode

USER_MESSAGES: dict[ScraperErrorCode, str] = {
    ScraperErrorCode.VIDEO_NOT_FOUND: "영상을 찾을 수 없습니다",
    ScraperErrorCode.CHANNEL_NOT_FOUND: "채널을 찾을 수 없습니다",
    ScraperErrorCode.INVALID_URL: "유효하지 않은 YouTube URL입니다",
    ScraperErrorCode.API_ERROR: "YouTube 정보를 불러오는데 실패했습니다",
    ScraperErrorCode.NETWORK_ERROR: "네트워크 연결을 확인해주세요",
    ScraperErrorCode.PARSING_ERROR: "YouTube 정보를 해석하는데 실패했습니다",
    ScraperErrorCode.RATE_LIMIT_EXCEEDED: "요청이 너무 많습니다. 잠시 후 다시 시도해주세요",
}
"""Display text per error code, shown next to a retry affordance."""


class TubescopeError(Exception):
    """Base exception for all tubescope errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize TubescopeError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class ScraperError(TubescopeError):
    """
    Exception raised when a page scrape or oEmbed lookup fails as a whole.

    Carries a machine-readable ``code`` so that callers (or a query layer
    with its own retry policy) can decide how to react without parsing
    the message.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ScraperErrorCode
        Machine-readable error category.
    retryable : bool
        Whether repeating the same request may succeed.
    status_code : int | None
        HTTP status code of the failed response, when there was one.

    Examples
    --------
    >>> try:
    ...     data = await scraper.scrape_channel_page("@somechannel")
    ... except ScraperError as e:
    ...     if e.code is ScraperErrorCode.CHANNEL_NOT_FOUND:
    ...         print(e.user_message)
    """

    def __init__(
        self,
        message: str,
        code: ScraperErrorCode = ScraperErrorCode.API_ERROR,
        retryable: bool = False,
        status_code: int | None = None,
    ) -> None:
        """
        Initialize ScraperError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        code : ScraperErrorCode, optional
            Machine-readable error category (default: API_ERROR).
        retryable : bool, optional
            Whether the request may succeed when repeated (default: False).
        status_code : int | None, optional
            HTTP status code of the failed response (default: None).
        """
        self.code = code
        self.retryable = retryable
        self.status_code = status_code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        """Localized text for displaying this error to an end user."""
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ScraperErrorCode.API_ERROR])


class CommentFetchError(ScraperError):
    """
    Exception raised when a comments endpoint request fails.

    For a non-2xx response the message is the server-provided ``error``
    field when the body has one, otherwise ``HTTP <status>``.

    Attributes
    ----------
    message : str
        Server-provided or generic error message.
    code : ScraperErrorCode
        ``API_ERROR`` for non-2xx responses, ``NETWORK_ERROR`` for
        transport failures, ``PARSING_ERROR`` for malformed bodies.
    status_code : int | None
        HTTP status code returned by the endpoint.

    Examples
    --------
    >>> try:
    ...     token = await client.prefetch_token("dQw4w9WgXcQ")
    ... except CommentFetchError as e:
    ...     print(e.message)
    HTTP 500
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: ScraperErrorCode = ScraperErrorCode.API_ERROR,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, code=code, retryable=retryable, status_code=status_code)

    @property
    def user_message(self) -> str:
        """Localized text for displaying this error to an end user."""
        if self.code is ScraperErrorCode.NETWORK_ERROR:
            return super().user_message
        return "댓글을 불러오는데 실패했습니다"
