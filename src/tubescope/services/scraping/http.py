"""
Shared page-fetch plumbing for the YouTube scrapers.

Maps HTTP outcomes onto :class:`~tubescope.exceptions.ScraperError` codes so
every scraper reports request-level failures the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from tubescope.config.settings import Settings
from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode

logger = logging.getLogger(__name__)

_HTML_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,image/apng,*/*;q=0.8"
)


def build_page_headers(app_settings: Settings, consent: bool = True) -> dict[str, str]:
    """
    Request headers that make YouTube serve the full desktop page.

    YouTube gates content behind region/consent heuristics keyed on the
    User-Agent and the ``CONSENT`` cookie. Compression is disabled so the
    body is plain text regardless of which codecs the transport supports.

    Parameters
    ----------
    app_settings : Settings
        Source of the User-Agent, Accept-Language and consent cookie.
    consent : bool, optional
        Include the consent cookie and browser fetch-metadata headers
        (default: True).

    Returns
    -------
    dict[str, str]
        Header mapping for ``httpx``.
    """
    headers = {
        "User-Agent": app_settings.user_agent,
        "Accept": _HTML_ACCEPT,
        "Accept-Language": app_settings.accept_language,
    }
    if consent:
        headers.update(
            {
                "Accept-Encoding": "identity",
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
                "Sec-Fetch-Dest": "document",
                "Sec-Fetch-Mode": "navigate",
                "Sec-Fetch-Site": "none",
                "Sec-Fetch-User": "?1",
                "Upgrade-Insecure-Requests": "1",
                "sec-ch-ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
                "sec-ch-ua-mobile": "?0",
                "sec-ch-ua-platform": '"Windows"',
                "Cookie": app_settings.consent_cookie,
            }
        )
    return headers


async def fetch_text(
    url: str,
    *,
    resource: str,
    not_found_code: ScraperErrorCode,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, str] | None = None,
    timeout: float = 30.0,
) -> str:
    """
    GET ``url`` and return the response body as text.

    Parameters
    ----------
    url : str
        Absolute URL to fetch.
    resource : str
        What is being fetched, used in error messages (e.g. a channel id).
    not_found_code : ScraperErrorCode
        Code raised for HTTP 404.
    headers : Mapping[str, str] | None, optional
        Request headers.
    params : Mapping[str, str] | None, optional
        Query parameters.
    timeout : float, optional
        Transport timeout in seconds (default: 30.0).

    Returns
    -------
    str
        Decoded response body.

    Raises
    ------
    ScraperError
        ``not_found_code`` for 404, ``API_ERROR`` for any other non-2xx
        status (retryable for 429 and 5xx), ``NETWORK_ERROR`` for
        transport failures and ``PARSING_ERROR`` when the body cannot be
        decoded.
    """
    try:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.get(
                url,
                params=dict(params) if params else None,
                headers=dict(headers) if headers else None,
                timeout=timeout,
            )
    except httpx.TransportError as e:
        logger.warning(
            "Fetching %s failed: %s: %s", resource, type(e).__name__, e
        )
        raise ScraperError(
            f"Network error while fetching {resource}: {type(e).__name__}",
            code=ScraperErrorCode.NETWORK_ERROR,
            retryable=True,
        ) from e

    status = response.status_code
    if status == 404:
        raise ScraperError(
            f"Not found: {resource}",
            code=not_found_code,
            status_code=status,
        )
    if not 200 <= status < 300:
        raise ScraperError(
            f"Fetching {resource} failed: HTTP {status}",
            code=ScraperErrorCode.API_ERROR,
            retryable=status == 429 or status >= 500,
            status_code=status,
        )

    try:
        return response.text
    except (UnicodeDecodeError, LookupError) as e:
        raise ScraperError(
            f"Could not decode response for {resource}",
            code=ScraperErrorCode.PARSING_ERROR,
        ) from e
