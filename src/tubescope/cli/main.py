"""
Main CLI entry point for tubescope.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.panel import Panel

from tubescope import __version__
from tubescope.cli.commands.comments import comments_app
from tubescope.cli.commands.parse import parse_app
from tubescope.cli.commands.scrape import scrape_app
from tubescope.config.settings import settings

console = Console()

app = typer.Typer(
    name="tubescope",
    help="YouTube page and comment extraction toolkit",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Add subcommands
app.add_typer(scrape_app, name="scrape", help="Scrape channel and video pages")
app.add_typer(comments_app, name="comments", help="Load video comments")
app.add_typer(parse_app, name="parse", help="Parse counts, durations and timestamps")


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the ``tubescope`` logger for a CLI run.

    Parameters
    ----------
    verbose : bool, optional
        Log at DEBUG instead of the configured level (default: False).
    """
    log_level = logging.DEBUG if verbose else getattr(logging, settings.log_level)

    root_logger = logging.getLogger("tubescope")
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        if getattr(handler, "_tubescope_cli", False):
            root_logger.removeHandler(handler)

    # Without --verbose, warnings still reach stderr through logging.lastResort
    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        console_handler._tubescope_cli = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]tubescope[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
) -> None:
    """
    tubescope - YouTube page and comment extraction toolkit.

    Scrape channel and watch pages, load comments through the two-phase
    token pipeline, and parse Korean/English abbreviated counts.
    """
    if version:
        console.print(f"tubescope v{__version__}")
        raise typer.Exit(code=0)

    setup_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print(
            "[yellow]Use 'tubescope --help' for available commands[/yellow]"
        )
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
