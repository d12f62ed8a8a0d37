"""
Comment loading services.

Modules
-------
client
    Thin async client for the comments endpoint (token, token-page and
    full-lookup requests).
pipeline
    Two-phase coordination: token prefetch, waiting, fallback, dedupe and
    caching.
"""

from tubescope.services.comments.client import CommentClient
from tubescope.services.comments.pipeline import (
    CommentTokenPipeline,
    TokenState,
    select_fetch_plan,
)

__all__ = [
    "CommentClient",
    "CommentTokenPipeline",
    "TokenState",
    "select_fetch_plan",
]
