"""
Command-line interface for tubescope.

Built with Typer and Rich for terminal output.
"""

from __future__ import annotations

__all__: list[str] = []
