"""
Two-phase comment loading.

Phase 1 fetches only a continuation token and is meant to be started as
soon as a video is known, before anyone asks for its comments. Phase 2
fetches the comment page, through the token when one is available and
through the full lookup otherwise. While Phase 1 is in flight, Phase 2
waits for it instead of deriving the token a second time.

Classes
-------
TokenState
    Tagged state of a video's Phase 1 result.
CommentTokenPipeline
    Coordinates both phases, deduplicates in-flight requests and caches
    results.

Functions
---------
select_fetch_plan
    Decide which request Phase 2 should issue for a token state.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

from tubescope.config.settings import settings
from tubescope.models.comment import CommentPage, CommentToken
from tubescope.models.enums import (
    CommentFetchMode,
    CommentSortOrder,
    FetchPlan,
    TokenStateKind,
)
from tubescope.services.comments.client import CommentClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenState:
    """
    Where a video's Phase 1 stands.

    Attributes
    ----------
    kind : TokenStateKind
        ``PENDING`` while the prefetch is in flight, ``READY_WITH_TOKEN``
        when it produced a token, ``READY_WITHOUT_TOKEN`` when it finished
        without one (including when it failed).
    token : str | None
        Continuation token, only for ``READY_WITH_TOKEN``.
    total_count_text : str | None
        Total-count text reported by the prefetch.
    error : BaseException | None
        Prefetch failure, if that is why there is no token.
    updated_at : float
        Monotonic time of the last transition.
    """

    kind: TokenStateKind
    token: str | None = None
    total_count_text: str | None = None
    error: BaseException | None = field(default=None, compare=False)
    updated_at: float = field(default=0.0, compare=False)

    @classmethod
    def pending(cls, now: float = 0.0) -> TokenState:
        return cls(kind=TokenStateKind.PENDING, updated_at=now)

    @classmethod
    def from_token(cls, result: CommentToken, now: float = 0.0) -> TokenState:
        if result.token:
            return cls(
                kind=TokenStateKind.READY_WITH_TOKEN,
                token=result.token,
                total_count_text=result.total_count_text,
                updated_at=now,
            )
        return cls(
            kind=TokenStateKind.READY_WITHOUT_TOKEN,
            total_count_text=result.total_count_text,
            updated_at=now,
        )

    @classmethod
    def failed(cls, error: BaseException, now: float = 0.0) -> TokenState:
        return cls(kind=TokenStateKind.READY_WITHOUT_TOKEN, error=error, updated_at=now)


def select_fetch_plan(state: TokenState | None) -> FetchPlan:
    """
    Decide which Phase 2 request to issue.

    Parameters
    ----------
    state : TokenState | None
        Current Phase 1 state; None when no prefetch was ever started.

    Returns
    -------
    FetchPlan
        ``WAIT`` while Phase 1 is in flight, ``USE_TOKEN`` when it left a
        token, ``FALLBACK`` (full lookup by video id) otherwise.
    """
    if state is None:
        return FetchPlan.FALLBACK
    if state.kind is TokenStateKind.PENDING:
        return FetchPlan.WAIT
    if state.kind is TokenStateKind.READY_WITH_TOKEN and state.token:
        return FetchPlan.USE_TOKEN
    return FetchPlan.FALLBACK


@dataclass
class _CacheEntry:
    value: Any
    stored_at: float


class CommentTokenPipeline:
    """
    Coordinate token prefetch and comment loading for videos.

    The pipeline is owned by the caller (one per screen, session or CLI
    run). It keeps:

    - the Phase 1 :class:`TokenState` per video id,
    - at most one in-flight request per ``(video id, mode)``,
    - a TTL cache of comment pages keyed by ``(video id, sort order)``,
      shared by the token path and the full path since both answer the
      same logical query.

    Parameters
    ----------
    client : CommentClient | None, optional
        Endpoint client (default: a new client on the global settings).
    cache_ttl_seconds : float | None, optional
        How long tokens and pages stay fresh (default:
        ``settings.comment_cache_ttl_seconds``).
    clock : Callable[[], float], optional
        Monotonic clock (default: ``time.monotonic``).

    Examples
    --------
    >>> pipeline = CommentTokenPipeline()
    >>> pipeline.start_prefetch("dQw4w9WgXcQ")  # on page entry
    >>> page = await pipeline.get_comments("dQw4w9WgXcQ")  # on comments open
    """

    def __init__(
        self,
        client: CommentClient | None = None,
        cache_ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client or CommentClient()
        self._ttl = (
            settings.comment_cache_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds
        )
        self._clock = clock
        self._token_states: dict[str, TokenState] = {}
        self._pages: dict[tuple[str, CommentSortOrder], _CacheEntry] = {}
        self._in_flight: dict[Hashable, asyncio.Task[Any]] = {}

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _is_fresh(self, stored_at: float) -> bool:
        return self._clock() - stored_at < self._ttl

    def _sweep(self) -> None:
        """Drop every expired token state and cached page."""
        expired_states = [
            vid
            for vid, state in self._token_states.items()
            if state.kind is not TokenStateKind.PENDING and not self._is_fresh(state.updated_at)
        ]
        for vid in expired_states:
            del self._token_states[vid]
        expired_pages = [
            key for key, entry in self._pages.items() if not self._is_fresh(entry.stored_at)
        ]
        for key in expired_pages:
            del self._pages[key]

    def _track(
        self, key: Hashable, factory: Callable[[], Awaitable[Any]]
    ) -> asyncio.Task[Any]:
        """Return the in-flight task for ``key``, starting one if needed."""
        task = self._in_flight.get(key)
        if task is not None and not task.done():
            return task

        task = asyncio.ensure_future(factory())

        def _forget(finished: asyncio.Task[Any]) -> None:
            if self._in_flight.get(key) is finished:
                del self._in_flight[key]
            if not finished.cancelled() and finished.exception() is not None:
                logger.debug("Request %s finished with %r", key, finished.exception())

        task.add_done_callback(_forget)
        self._in_flight[key] = task
        return task

    def token_state(self, video_id: str) -> TokenState | None:
        """
        Current Phase 1 state for a video.

        A finished state older than the cache TTL counts as absent, so a
        stale token is never used.
        """
        state = self._token_states.get(video_id)
        if state is None:
            return None
        if state.kind is not TokenStateKind.PENDING and not self._is_fresh(state.updated_at):
            del self._token_states[video_id]
            return None
        return state

    def is_token_loading(self, video_id: str) -> bool:
        """Whether Phase 1 for ``video_id`` is still in flight."""
        state = self.token_state(video_id)
        return state is not None and state.kind is TokenStateKind.PENDING

    def invalidate(self, video_id: str | None = None) -> None:
        """Drop cached tokens and pages for one video, or for all videos."""
        if video_id is None:
            self._token_states = {
                vid: state
                for vid, state in self._token_states.items()
                if state.kind is TokenStateKind.PENDING
            }
            self._pages.clear()
            return

        state = self._token_states.get(video_id)
        if state is not None and state.kind is not TokenStateKind.PENDING:
            del self._token_states[video_id]
        for key in [key for key in self._pages if key[0] == video_id]:
            del self._pages[key]

    # ------------------------------------------------------------------
    # Phase 1
    # ------------------------------------------------------------------

    async def _run_prefetch(self, video_id: str) -> CommentToken:
        try:
            result = await self._client.prefetch_token(video_id)
        except Exception as e:
            self._token_states[video_id] = TokenState.failed(e, now=self._clock())
            raise
        self._token_states[video_id] = TokenState.from_token(result, now=self._clock())
        return result

    def _prefetch_task(self, video_id: str) -> asyncio.Task[Any]:
        key = (video_id, CommentFetchMode.TOKEN)
        running = self._in_flight.get(key)
        if running is None or running.done():
            self._token_states[video_id] = TokenState.pending(now=self._clock())
        return self._track(key, lambda: self._run_prefetch(video_id))

    def start_prefetch(self, video_id: str) -> asyncio.Task[Any] | None:
        """
        Kick off Phase 1 in the background.

        Must be called from a running event loop. Does nothing when a fresh
        successful token state already exists; a failed prefetch is retried.

        Returns
        -------
        asyncio.Task | None
            The prefetch task, or None when no request was needed.
        """
        self._sweep()
        state = self.token_state(video_id)
        if state is not None and state.kind is not TokenStateKind.PENDING and state.error is None:
            return None
        logger.debug("Starting comment token prefetch for %s", video_id)
        return self._prefetch_task(video_id)

    async def prefetch_token(self, video_id: str) -> CommentToken:
        """
        Run Phase 1 and return its result.

        A fresh earlier result is returned without a request; a concurrent
        prefetch for the same video is joined rather than repeated.

        Raises
        ------
        CommentFetchError
            When the token request fails. The failure is also recorded as
            a ``READY_WITHOUT_TOKEN`` state so Phase 2 falls back.
        """
        self._sweep()
        state = self.token_state(video_id)
        if state is not None and state.kind is not TokenStateKind.PENDING and state.error is None:
            return CommentToken(token=state.token, total_count_text=state.total_count_text)
        return await asyncio.shield(self._prefetch_task(video_id))

    # ------------------------------------------------------------------
    # Phase 2
    # ------------------------------------------------------------------

    async def _await_prefetch(self, video_id: str) -> None:
        task = self._in_flight.get((video_id, CommentFetchMode.TOKEN))
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
        except Exception:
            # Recorded as READY_WITHOUT_TOKEN by _run_prefetch.
            pass

    async def get_comments(
        self,
        video_id: str,
        sort_by: CommentSortOrder = CommentSortOrder.TOP,
        refresh: bool = False,
    ) -> CommentPage:
        """
        Phase 2: load the comment page for a video.

        Waits for an in-flight Phase 1, then uses the token when there is
        one and the full lookup otherwise. Both paths fill the same cache
        entry.

        Parameters
        ----------
        video_id : str
            YouTube video id.
        sort_by : CommentSortOrder, optional
            Listing order (default: TOP).
        refresh : bool, optional
            Ignore a cached page (default: False).

        Returns
        -------
        CommentPage
            The comments.

        Raises
        ------
        CommentFetchError
            When the comment request fails.
        """
        self._sweep()
        cache_key = (video_id, sort_by)
        cached = self._pages.get(cache_key)
        if cached is not None and not refresh and self._is_fresh(cached.stored_at):
            logger.debug("Comment cache hit for %s (%s)", video_id, sort_by.value)
            return cached.value

        plan = select_fetch_plan(self.token_state(video_id))
        if plan is FetchPlan.WAIT:
            logger.debug("Waiting for comment token prefetch for %s", video_id)
            await self._await_prefetch(video_id)
            plan = select_fetch_plan(self.token_state(video_id))
            if plan is FetchPlan.WAIT:
                plan = FetchPlan.FALLBACK

        state = self.token_state(video_id)
        if plan is FetchPlan.USE_TOKEN and state is not None and state.token:
            token, total_count_text = state.token, state.total_count_text
            page_task = self._track(
                (video_id, CommentFetchMode.COMMENTS, sort_by),
                lambda: self._client.get_comments_with_token(token, total_count_text),
            )
        else:
            page_task = self._track(
                (video_id, CommentFetchMode.FULL, sort_by),
                lambda: self._client.get_comments(video_id, sort_by),
            )

        page: CommentPage = await asyncio.shield(page_task)
        self._pages[cache_key] = _CacheEntry(value=page, stored_at=self._clock())
        return page
