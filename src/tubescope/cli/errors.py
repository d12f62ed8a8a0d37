"""
Error display helpers for CLI commands.

Request-level errors are rendered as a red Rich panel carrying the
machine-readable code, and the command exits with status 1.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tubescope.exceptions import ScraperError, TubescopeError

# Module-level console for CLI error display
console = Console()

EXIT_CODE_ERROR = 1


def display_error(error: Exception, title: str = "Error") -> None:
    """Print ``error`` in a red panel, with its code when it has one."""
    if isinstance(error, ScraperError):
        body = (
            f"[red]{escape(error.message)}[/red]\n"
            f"[dim]Code:[/dim] {error.code.value}\n"
            f"[dim]{error.user_message}[/dim]"
        )
        if error.retryable:
            body += "\n[yellow]This request may succeed if retried.[/yellow]"
    elif isinstance(error, TubescopeError):
        body = f"[red]{escape(error.message)}[/red]"
    else:
        body = f"[red]{type(error).__name__}: {escape(str(error))}[/red]"

    console.print(Panel(body, title=title, border_style="red"))


def fail(error: Exception, title: str = "Error") -> typer.Exit:
    """Display ``error`` and build the exit exception to raise."""
    display_error(error, title=title)
    return typer.Exit(code=EXIT_CODE_ERROR)
