"""
CLI commands exposing the text parsers and formatters.
"""

from __future__ import annotations

import typer
from rich.console import Console

from tubescope.utils.duration import format_seconds, parse_iso8601_duration
from tubescope.utils.numbers import format_abbreviated_number, parse_abbreviated_number
from tubescope.utils.relative_time import format_relative_time

console = Console()

parse_app = typer.Typer(
    name="parse",
    help="Parse and format counts, durations and timestamps",
    no_args_is_help=True,
)


@parse_app.command("number")
def parse_number(
    text: str = typer.Argument(..., help='Abbreviated count, e.g. "1.5만" or "3.2K"'),
    english: bool = typer.Option(False, "--english", help="Re-abbreviate with K/M/B"),
) -> None:
    """Parse an abbreviated count into an integer."""
    value = parse_abbreviated_number(text)
    console.print(f"{value}  [dim]({format_abbreviated_number(value, korean=not english)})[/dim]")


@parse_app.command("duration")
def parse_duration(
    value: str = typer.Argument(..., help='ISO-8601 duration ("PT1H2M3S") or seconds'),
) -> None:
    """Format a duration as H:MM:SS or M:SS."""
    if value.isdigit():
        console.print(format_seconds(int(value)))
    else:
        console.print(parse_iso8601_duration(value))


@parse_app.command("ago")
def parse_ago(
    timestamp: str = typer.Argument(..., help="ISO-8601 timestamp"),
    locale: str = typer.Option("ko", "--locale", help="ko or en"),
) -> None:
    """Describe how long ago a timestamp was."""
    text = format_relative_time(timestamp, locale=locale)
    if not text:
        console.print(f"[red]Could not parse timestamp: {timestamp}[/red]")
        raise typer.Exit(code=1)
    console.print(text)
