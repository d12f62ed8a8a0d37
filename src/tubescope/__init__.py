"""
tubescope - YouTube page and comment extraction toolkit.

Pulls structured facts (channel names, subscriber counts, like counts,
durations, comment pages) out of YouTube HTML and comment-endpoint
payloads that have no stable contract.
"""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "tubescope"
__email__ = "noreply@tubescope.dev"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
