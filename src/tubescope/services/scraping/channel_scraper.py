"""
Channel page scraper.

Fetches a YouTube channel page once and pulls five independent facts out
of the raw HTML: name, subscriber count, avatar/banner images, description
and video count. Each fact has its own ordered pattern chain; a chain that
finds nothing leaves its field at the default and the scrape carries on.

Classes
-------
ChannelPageScraper
    Fetch a channel page and extract :class:`ScrapedChannelData` from it.

Constants
---------
CHANNEL_NAME_PATTERNS, SUBSCRIBER_PATTERNS, AVATAR_PATTERNS,
BANNER_PATTERNS, DESCRIPTION_PATTERNS, VIDEO_COUNT_PATTERNS
    Pattern chains, most specific markup first.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable

from tubescope.config.settings import Settings, settings
from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode
from tubescope.models.scraped import ScrapedChannelData
from tubescope.services.scraping.http import build_page_headers, fetch_text
from tubescope.services.scraping.pattern_chain import FieldPattern, extract_field
from tubescope.utils.numbers import parse_abbreviated_number, parse_count_text

logger = logging.getLogger(__name__)

_TITLE_PLACEHOLDER = "YouTube"
_MIN_DESCRIPTION_LENGTH = 5


def _is_real_name(value: str) -> bool:
    return value != _TITLE_PLACEHOLDER


def _has_subscriber_count(value: str) -> bool:
    return parse_count_text(value).value > 0


def _is_long_enough(value: str) -> bool:
    return len(value) > _MIN_DESCRIPTION_LENGTH


def _is_positive_count(value: str) -> bool:
    return parse_abbreviated_number(value) > 0


CHANNEL_NAME_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r"<ytd-channel-name[^>]*>[\s\S]*?<yt-formatted-string[^>]*>([^<]+)</yt-formatted-string>",
        validate=_is_real_name,
        label="name:ytd-channel-name",
    ),
    FieldPattern.compile(
        r'<h1[^>]*class="[^"]*style-scope ytd-c4-tabbed-header-renderer[^"]*"[^>]*>'
        r"[\s\S]*?<yt-formatted-string[^>]*>([^<]+)</yt-formatted-string>",
        validate=_is_real_name,
        label="name:c4-tabbed-header",
    ),
    FieldPattern.compile(
        r'<h1[^>]*class="[^"]*dynamicTextViewModelH1[^"]*"[^>]*>'
        r'[\s\S]*?<span[^>]*role="text"[^>]*>([^<]+)</span>',
        validate=_is_real_name,
        label="name:dynamic-text-h1",
    ),
    FieldPattern.compile(
        r"<title>([^-|]+?)(?:\s*-\s*YouTube)?</title>",
        validate=_is_real_name,
        label="name:title",
    ),
    FieldPattern.compile(
        r'<meta[^>]*property="og:title"[^>]*content="([^"]+)"',
        validate=_is_real_name,
        label="name:og:title",
    ),
    FieldPattern.compile(
        r'<meta[^>]*name="twitter:title"[^>]*content="([^"]+)"',
        validate=_is_real_name,
        label="name:twitter:title",
    ),
    FieldPattern.compile(r'"name":\s*"([^"]+)"', validate=_is_real_name, label="name:json"),
    FieldPattern.compile(
        r'class="[^"]*channel[^"]*title[^"]*"[^>]*>([^<]+)<',
        validate=_is_real_name,
        label="name:class-heuristic",
    ),
]

SUBSCRIBER_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r"<ytd-c4-tabbed-header-renderer[^>]*>[\s\S]*?구독자\s*([0-9만천억.KMB]+)"
        r"[\s\S]*?</ytd-c4-tabbed-header-renderer>",
        validate=_has_subscriber_count,
        label="subscribers:c4-header",
    ),
    FieldPattern.compile(
        r'"subscriberCountText":\s*\{\s*"accessibility":\s*\{\s*"accessibilityData":'
        r'\s*\{\s*"label":\s*"구독자\s*([^"]*?)명"',
        validate=_has_subscriber_count,
        label="subscribers:accessibility-label",
    ),
    FieldPattern.compile(
        r'"subscriberCountText":\s*\{\s*"simpleText":\s*"구독자\s*([^"]+?)명"',
        validate=_has_subscriber_count,
        label="subscribers:simple-text-ko",
    ),
    FieldPattern.compile(
        r'"subscriberCountText":\s*\{\s*"simpleText":\s*"([^"]+)"',
        validate=_has_subscriber_count,
        label="subscribers:simple-text",
    ),
    FieldPattern.compile(
        r'"subscriberCountText":\s*"([^"]+)"',
        validate=_has_subscriber_count,
        label="subscribers:plain-text",
    ),
    FieldPattern.compile(
        r"구독자\s*([0-9만천억.,\s]+)명",
        validate=_has_subscriber_count,
        label="subscribers:ko-sentence",
    ),
    FieldPattern.compile(
        r"구독자\s*([^\s<]+)",
        validate=_has_subscriber_count,
        label="subscribers:ko-token",
    ),
    FieldPattern.compile(
        r"subscribers?\s*([^\s<]+)",
        validate=_has_subscriber_count,
        label="subscribers:en-token",
    ),
    FieldPattern.compile(
        r"([0-9.]+[KMB만천억]+)\s*(?:명|subscribers?)",
        validate=_has_subscriber_count,
        label="subscribers:abbreviated-suffix",
    ),
    FieldPattern.compile(
        r'aria-label="[^"]*구독자[^"]*?([0-9,.]+[만천억KMB]?)[^"]*명[^"]*"',
        validate=_has_subscriber_count,
        label="subscribers:aria-label",
    ),
]

AVATAR_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r'yt3\.googleusercontent\.com/[^"]*=s160[^"]*', group_index=0, label="avatar:s160"
    ),
    FieldPattern.compile(
        r'yt3\.googleusercontent\.com/[^"]*=s\d+[^"]*', group_index=0, label="avatar:any-size"
    ),
]

BANNER_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r'yt3\.googleusercontent\.com/[^"]*=w2560[^"]*', group_index=0, label="banner:w2560"
    ),
    FieldPattern.compile(
        r'yt3\.googleusercontent\.com/[^"]*=w\d+[^"]*', group_index=0, label="banner:any-width"
    ),
]

DESCRIPTION_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r'<span[^>]*class="[^"]*yt-core-attributed-string[^"]*"[^>]*role="text"[^>]*>([^<]+)</span>'
        r"(?:[^<]*<button[^>]*>[\s\S]*?더보기)",
        validate=_is_long_enough,
        label="description:attributed-string",
    ),
    FieldPattern.compile(
        r'"description":\s*"([^"]+)"', validate=_is_long_enough, label="description:json"
    ),
    FieldPattern.compile(
        r'<meta[^>]*name="description"[^>]*content="([^"]+)"',
        validate=_is_long_enough,
        label="description:meta",
    ),
    FieldPattern.compile(
        r'<meta[^>]*property="og:description"[^>]*content="([^"]+)"',
        validate=_is_long_enough,
        label="description:og",
    ),
    FieldPattern.compile(
        r'class="[^"]*channel[^"]*description[^"]*"[^>]*>([^<]+)<',
        validate=_is_long_enough,
        label="description:class-heuristic",
    ),
]

VIDEO_COUNT_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(r"동영상\s*([0-9,]+)개", validate=_is_positive_count, label="videos:ko"),
    FieldPattern.compile(r"videos?\s*([0-9,]+)", validate=_is_positive_count, label="videos:en"),
    FieldPattern.compile(
        r'"videoCountText":\s*"([^"]+)"', validate=_is_positive_count, label="videos:json"
    ),
    FieldPattern.compile(
        r"(\d+(?:[,\d]*)?)\s*(?:개|videos?)",
        validate=_is_positive_count,
        label="videos:suffix",
    ),
]

_WHITESPACE_RUN_RE = re.compile(r"\s+")


def clean_description(description: str) -> str:
    """Collapse whitespace runs and restore JSON-escaped newlines and quotes."""
    return (
        _WHITESPACE_RUN_RE.sub(" ", description)
        .replace("\\n", "\n")
        .replace('\\"', '"')
        .strip()
    )


def build_channel_url(channel_id: str, base_url: str = "https://www.youtube.com") -> str:
    """
    Channel page URL for a channel id or handle.

    ``UC``-prefixed ids use the ``/channel/`` path; anything else (such as
    an ``@handle``) is appended to the site root as is.
    """
    channel_id = channel_id.strip().lstrip("/")
    if channel_id.startswith("UC"):
        return f"{base_url}/channel/{channel_id}"
    return f"{base_url}/{channel_id}"


class ChannelPageScraper:
    """
    Fetch a YouTube channel page and extract channel facts from its HTML.

    Extraction runs as a fixed sequence of steps (name, subscribers,
    images, description, video count) with a short ``asyncio.sleep``
    between steps so that regex scanning over a large page never holds the
    event loop for the whole scrape.

    Parameters
    ----------
    app_settings : Settings | None, optional
        Configuration source (default: the global settings).
    yield_delay : float | None, optional
        Pause between extraction steps in seconds (default:
        ``settings.scrape_yield_delay``).

    Examples
    --------
    >>> scraper = ChannelPageScraper()
    >>> data = await scraper.scrape_channel_page("@somechannel")
    >>> data.subscriber_count
    150000
    """

    def __init__(
        self,
        app_settings: Settings | None = None,
        yield_delay: float | None = None,
    ) -> None:
        self._settings = app_settings or settings
        self._yield_delay = (
            self._settings.scrape_yield_delay if yield_delay is None else yield_delay
        )
        self._steps: list[tuple[str, Callable[[str, ScrapedChannelData], None]]] = [
            ("name", self.extract_channel_name),
            ("subscribers", self.extract_subscriber_count),
            ("images", self.extract_channel_images),
            ("description", self.extract_channel_description),
            ("video_count", self.extract_video_count),
        ]

    async def scrape_channel_page(self, channel_id: str) -> ScrapedChannelData:
        """
        Fetch a channel page and extract its data.

        Parameters
        ----------
        channel_id : str
            ``UC``-prefixed channel id or ``@handle``.

        Returns
        -------
        ScrapedChannelData
            Extracted data; fields that could not be found keep defaults.

        Raises
        ------
        ScraperError
            ``CHANNEL_NOT_FOUND`` on HTTP 404, ``API_ERROR`` on any other
            non-2xx status, ``NETWORK_ERROR`` on transport failure and
            ``PARSING_ERROR`` when the page cannot be processed.
        """
        url = build_channel_url(channel_id, self._settings.youtube_base_url)
        logger.info("Scraping channel page for %s", channel_id)

        html = await fetch_text(
            url,
            resource=f"channel {channel_id}",
            not_found_code=ScraperErrorCode.CHANNEL_NOT_FOUND,
            headers=build_page_headers(self._settings),
            params=self._settings.page_query_params,
            timeout=self._settings.request_timeout,
        )

        try:
            return await self.extract_channel_data_from_html(html)
        except ScraperError:
            raise
        except Exception as e:
            logger.error("Channel page processing failed for %s: %s", channel_id, e)
            raise ScraperError(
                f"Failed to process channel page for {channel_id}",
                code=ScraperErrorCode.PARSING_ERROR,
            ) from e

    async def extract_channel_data_from_html(self, html: str) -> ScrapedChannelData:
        """
        Run every extraction step over ``html``.

        A step that raises is logged and skipped; its field keeps the
        default value.

        Parameters
        ----------
        html : str
            Raw channel page HTML.

        Returns
        -------
        ScrapedChannelData
            The filled-in data, returned only after all steps have run.
        """
        data = ScrapedChannelData()

        for index, (step_name, step) in enumerate(self._steps):
            if index > 0:
                await asyncio.sleep(self._yield_delay)
            try:
                step(html, data)
            except Exception as e:
                logger.debug(
                    "Channel extraction step %s failed: %s: %s",
                    step_name,
                    type(e).__name__,
                    e,
                )

        logger.debug(
            "Channel extraction finished: name=%r subscribers=%d videos=%s",
            data.name,
            data.subscriber_count,
            data.video_count,
        )
        return data

    def extract_channel_name(self, html: str, data: ScrapedChannelData) -> None:
        """Fill ``data.name`` from the first accepted name pattern."""
        name = extract_field(html, CHANNEL_NAME_PATTERNS)
        if name:
            data.name = name

    def extract_subscriber_count(self, html: str, data: ScrapedChannelData) -> None:
        """Fill ``data.subscriber_count`` and ``data.subscriber_text``."""
        subscriber_text = extract_field(html, SUBSCRIBER_PATTERNS)
        if not subscriber_text:
            return
        parsed = parse_count_text(subscriber_text)
        data.subscriber_count = parsed.value
        if parsed.matched_text:
            data.subscriber_text = parsed.matched_text

    def extract_channel_images(self, html: str, data: ScrapedChannelData) -> None:
        """Fill ``data.avatar_url`` and ``data.banner_url``."""
        avatar = extract_field(html, AVATAR_PATTERNS)
        if avatar:
            data.avatar_url = f"https://{avatar}"

        banner = extract_field(html, BANNER_PATTERNS)
        if banner:
            data.banner_url = f"https://{banner}"

    def extract_channel_description(self, html: str, data: ScrapedChannelData) -> None:
        """Fill ``data.description`` with the cleaned description text."""
        description = extract_field(html, DESCRIPTION_PATTERNS)
        if description:
            data.description = clean_description(description)

    def extract_video_count(self, html: str, data: ScrapedChannelData) -> None:
        """Fill ``data.video_count``."""
        video_count_text = extract_field(html, VIDEO_COUNT_PATTERNS)
        if video_count_text:
            data.video_count = parse_abbreviated_number(video_count_text)
