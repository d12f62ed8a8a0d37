"""
Watch page scraper.

Pulls view/like counts, upload date, duration, owner name and description
out of a YouTube watch page. Structured sources (``ytInitialData``,
``ytInitialPlayerResponse``) are preferred; ordered regex chains over the
raw HTML fill whatever they leave empty.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from datetime import timezone

from tubescope.config.settings import Settings, settings
from tubescope.exceptions import ScraperError
from tubescope.models.enums import ScraperErrorCode
from tubescope.models.scraped import ParsedNumber, ScrapedVideoData
from tubescope.services.scraping.http import build_page_headers, fetch_text
from tubescope.services.scraping.json_extract import (
    YT_INITIAL_DATA_RE,
    YT_INITIAL_PLAYER_RE,
    dig,
    find_assigned_json,
)
from tubescope.services.scraping.pattern_chain import FieldPattern, extract_field
from tubescope.utils.duration import format_seconds, parse_iso8601_duration
from tubescope.utils.numbers import parse_abbreviated_number
from tubescope.utils.relative_time import parse_timestamp
from tubescope.utils.url_parser import build_watch_url

logger = logging.getLogger(__name__)

_MAX_PLAUSIBLE_ARIA_LIKES = 100_000_000

_KOREAN_LIKE_RE = re.compile(r"([\d.]+[천만억])")
_ENGLISH_LIKE_RE = re.compile(r"([\d.]+[KMB])", re.IGNORECASE)
_PLAIN_LIKE_RE = re.compile(r"([\d,]+)")

# Paths below contents.twoColumnWatchNextResults.results.results.contents
_PRIMARY_INFO = ("contents", "twoColumnWatchNextResults", "results", "results", "contents")
_LIKE_BUTTON_PATHS: list[tuple[str | int, ...]] = [
    (
        *_PRIMARY_INFO, 0, "videoPrimaryInfoRenderer", "videoActions", "menuRenderer",
        "topLevelButtons", 0, "segmentedLikeDislikeButtonViewModel", "likeButtonViewModel",
        "likeButtonViewModel", "toggleButtonViewModel", "toggleButtonViewModel",
        "defaultButtonViewModel", "buttonViewModel", "title",
    ),
    (
        *_PRIMARY_INFO, 0, "videoPrimaryInfoRenderer", "videoActions", "menuRenderer",
        "topLevelButtons", 0, "toggleButtonRenderer", "defaultText", "accessibility",
        "accessibilityData", "label",
    ),
]
_OWNER_TITLE_PATH: tuple[str | int, ...] = (
    *_PRIMARY_INFO, 1, "videoSecondaryInfoRenderer", "owner", "videoOwnerRenderer",
    "title", "runs", 0, "text",
)


def normalize_upload_date(value: str) -> str | None:
    """
    Normalize a scraped date string to an ISO-8601 UTC timestamp.

    Only values that look like ISO dates (contain ``T`` or ``-``) are
    considered; anything else, or anything unparseable, gives None.
    """
    if "T" not in value and "-" not in value:
        return None
    try:
        parsed = parse_timestamp(value)
    except (ValueError, TypeError):
        return None
    return parsed.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def extract_like_count(text: str | None) -> ParsedNumber:
    """
    Parse a like count out of a like-button title or label.

    Korean-unit tokens win, then English-unit tokens. A plain number is
    only trusted when it has a thousands separator or at least four digits
    and exceeds 100, since short bare numbers in labels are rarely counts.

    Parameters
    ----------
    text : str | None
        Label such as ``"좋아요 1.5만개"`` or ``"3,072 likes"``.

    Returns
    -------
    ParsedNumber
        The like count, with ``matched_text`` for abbreviated tokens.
    """
    if not text:
        return ParsedNumber()

    for pattern in (_KOREAN_LIKE_RE, _ENGLISH_LIKE_RE):
        match = pattern.search(text)
        if match:
            token = match.group(1)
            return ParsedNumber(value=parse_abbreviated_number(token), matched_text=token)

    plain = _PLAIN_LIKE_RE.search(text)
    if plain:
        digits = plain.group(1)
        if "," in digits or len(digits) >= 4:
            value = parse_abbreviated_number(digits)
            if value > 100:
                return ParsedNumber(value=value)

    return ParsedNumber()


def _is_upload_date(value: str) -> bool:
    return normalize_upload_date(value) is not None


def _has_like_count(value: str) -> bool:
    return extract_like_count(value).value > 0


def _is_plausible_like_count(value: str) -> bool:
    return 0 < parse_abbreviated_number(value) < _MAX_PLAUSIBLE_ARIA_LIKES


UPLOAD_DATE_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(r'"uploadDate":"([^"]+)"', flags=0, validate=_is_upload_date),
    FieldPattern.compile(r'"datePublished":"([^"]+)"', flags=0, validate=_is_upload_date),
    FieldPattern.compile(r"""publishDate['"]:['"]([^'"]+)['"]""", flags=0, validate=_is_upload_date),
    FieldPattern.compile(r"""upload.*?date['"]:['"]([^'"]+)['"]""", validate=_is_upload_date),
]

VIEW_COUNT_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(r'"viewCount":"(\d+)"', flags=0),
    FieldPattern.compile(r'<meta itemprop="interactionCount" content="(\d+)"', flags=0),
]

LIKE_LABEL_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r'"defaultText":\{"accessibility":\{"accessibilityData":\{"label":"([^"]*좋아요[^"]*)"\}\}',
        flags=0,
        validate=_has_like_count,
    ),
    FieldPattern.compile(r'"likeCountText":"([^"]+)"', flags=0, validate=_has_like_count),
    FieldPattern.compile(r'"toggledText":"([^"]*좋아요[^"]*)"', flags=0, validate=_has_like_count),
    FieldPattern.compile(r'"title":"([^"]*좋아요[^"]*)"', flags=0, validate=_has_like_count),
]

LIKE_ARIA_PATTERNS: list[FieldPattern] = [
    FieldPattern.compile(
        r'aria-label="[^"]*사용자\s*([\d,]+)\s*명[^"]*좋아', validate=_is_plausible_like_count
    ),
    FieldPattern.compile(r'aria-label="[^"]*?([\d,]+)\s*명[^"]*좋아', validate=_is_plausible_like_count),
    FieldPattern.compile(
        r'aria-label="[^"]*?([\d,]+)\s*(?:others?|people)?[^"]*like',
        validate=_is_plausible_like_count,
    ),
]

_LENGTH_SECONDS_RE = re.compile(r'"lengthSeconds":"(\d+)"')
_APPROX_DURATION_MS_RE = re.compile(r'"approxDurationMs":"(\d+)"')
_ISO_DURATION_RE = re.compile(r'"duration":"(PT[0-9HMS]+)"')


class VideoPageScraper:
    """
    Fetch a YouTube watch page and extract video metrics from its HTML.

    Parameters
    ----------
    app_settings : Settings | None, optional
        Configuration source (default: the global settings).
    yield_delay : float | None, optional
        Pause between extraction steps in seconds (default:
        ``settings.scrape_yield_delay``).
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
        self._steps: list[tuple[str, Callable[[str, ScrapedVideoData], None]]] = [
            ("upload_date", self.extract_upload_date_from_html),
            ("initial_data", self.extract_initial_data),
            ("metadata", self.extract_metadata),
        ]

    async def scrape_video_page(self, video_id: str) -> ScrapedVideoData:
        """
        Fetch a watch page and extract its metrics.

        Parameters
        ----------
        video_id : str
            YouTube video id.

        Returns
        -------
        ScrapedVideoData
            Extracted data; fields that could not be found keep defaults.

        Raises
        ------
        ScraperError
            ``VIDEO_NOT_FOUND`` on HTTP 404, ``API_ERROR`` on any other
            non-2xx status, ``NETWORK_ERROR`` on transport failure and
            ``PARSING_ERROR`` when the page cannot be processed.
        """
        logger.info("Scraping watch page for %s", video_id)
        html = await fetch_text(
            build_watch_url(video_id, self._settings.youtube_base_url),
            resource=f"video {video_id}",
            not_found_code=ScraperErrorCode.VIDEO_NOT_FOUND,
            headers=build_page_headers(self._settings, consent=False),
            timeout=self._settings.request_timeout,
        )
        logger.debug("Received %d characters of HTML for %s", len(html), video_id)

        try:
            return await self.extract_data_from_html(html)
        except ScraperError:
            raise
        except Exception as e:
            logger.error("Watch page processing failed for %s: %s", video_id, e)
            raise ScraperError(
                f"Failed to process watch page for {video_id}",
                code=ScraperErrorCode.PARSING_ERROR,
            ) from e

    async def scrape_metrics(self, video_id: str) -> ScrapedVideoData:
        """Scrape a watch page keeping only view/like counts and upload date."""
        full = await self.scrape_video_page(video_id)
        return ScrapedVideoData(
            view_count=full.view_count,
            like_count=full.like_count,
            like_text=full.like_text,
            upload_date=full.upload_date,
        )

    async def extract_data_from_html(self, html: str) -> ScrapedVideoData:
        """Run every extraction step over ``html``; failing steps are skipped."""
        data = ScrapedVideoData()

        for index, (step_name, step) in enumerate(self._steps):
            if index > 0:
                await asyncio.sleep(self._yield_delay)
            try:
                step(html, data)
            except Exception as e:
                logger.debug(
                    "Video extraction step %s failed: %s: %s",
                    step_name,
                    type(e).__name__,
                    e,
                )

        logger.debug(
            "Video extraction finished: views=%d likes=%d uploaded=%r duration=%s",
            data.view_count,
            data.like_count,
            data.upload_date,
            data.duration,
        )
        return data

    def extract_upload_date_from_html(self, html: str, data: ScrapedVideoData) -> None:
        """Fill ``data.upload_date`` from the first parseable date pattern."""
        raw_date = extract_field(html, UPLOAD_DATE_PATTERNS)
        if raw_date:
            data.upload_date = normalize_upload_date(raw_date) or ""

    def extract_initial_data(self, html: str, data: ScrapedVideoData) -> None:
        """Fill likes, owner name, description and views from embedded JSON."""
        initial_data = find_assigned_json(html, YT_INITIAL_DATA_RE)
        if initial_data is not None:
            for path in _LIKE_BUTTON_PATHS:
                label = dig(initial_data, *path)
                if not isinstance(label, str):
                    continue
                likes = extract_like_count(label)
                if likes.value > 0:
                    data.like_count = likes.value
                    data.like_text = likes.matched_text
                    break

            owner = dig(initial_data, *_OWNER_TITLE_PATH)
            if isinstance(owner, str) and owner:
                data.channel_name = owner

        player = find_assigned_json(html, YT_INITIAL_PLAYER_RE)
        if player is not None:
            description = dig(player, "videoDetails", "shortDescription")
            if isinstance(description, str) and description:
                data.description = description
            views = dig(player, "videoDetails", "viewCount")
            if views is not None and not data.view_count:
                data.view_count = parse_abbreviated_number(str(views))
            if not data.channel_name:
                author = dig(player, "videoDetails", "author")
                if isinstance(author, str) and author:
                    data.channel_name = author

    def extract_metadata(self, html: str, data: ScrapedVideoData) -> None:
        """Fill views, duration and likes still missing, from raw HTML patterns."""
        if not data.view_count:
            views = extract_field(html, VIEW_COUNT_PATTERNS)
            if views:
                data.view_count = int(views)

        if data.duration == "0:00":
            data.duration = self._extract_duration(html)

        if not data.like_count:
            label = extract_field(html, LIKE_LABEL_PATTERNS)
            if label:
                likes = extract_like_count(label)
                data.like_count = likes.value
                data.like_text = likes.matched_text
            else:
                aria_count = extract_field(html, LIKE_ARIA_PATTERNS)
                if aria_count:
                    data.like_count = parse_abbreviated_number(aria_count)

    @staticmethod
    def _extract_duration(html: str) -> str:
        match = _LENGTH_SECONDS_RE.search(html)
        if match:
            return format_seconds(int(match.group(1)))

        match = _APPROX_DURATION_MS_RE.search(html)
        if match:
            return format_seconds(int(match.group(1)) // 1000)

        match = _ISO_DURATION_RE.search(html)
        if match:
            return parse_iso8601_duration(match.group(1))

        return "0:00"
