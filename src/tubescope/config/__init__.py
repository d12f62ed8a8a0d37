"""
Configuration management module for tubescope.

Handles application settings, environment variables, upstream endpoints,
and request header defaults.
"""

from __future__ import annotations

__all__: list[str] = []
