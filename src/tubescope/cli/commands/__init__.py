"""CLI command groups for tubescope."""
