"""
CLI commands for loading video comments through the token pipeline.
"""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tubescope.cli.errors import fail
from tubescope.exceptions import TubescopeError
from tubescope.models.comment import CommentPage, CommentToken
from tubescope.models.enums import CommentSortOrder
from tubescope.services.comments.pipeline import CommentTokenPipeline

console = Console()

comments_app = typer.Typer(
    name="comments",
    help="Load video comments",
    no_args_is_help=True,
)


async def _load(video_id: str, sort_by: CommentSortOrder, prefetch: bool) -> CommentPage:
    pipeline = CommentTokenPipeline()
    if prefetch:
        pipeline.start_prefetch(video_id)
    return await pipeline.get_comments(video_id, sort_by)


@comments_app.command("list")
def list_comments(
    video_id: str = typer.Argument(..., help="YouTube video ID"),
    sort_by: CommentSortOrder = typer.Option(
        CommentSortOrder.TOP, "--sort", "-s", help="Comment order"
    ),
    prefetch: bool = typer.Option(
        True, "--prefetch/--no-prefetch", help="Fetch a continuation token first"
    ),
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Maximum comments to show"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show the first page of comments for a video."""
    try:
        page = asyncio.run(_load(video_id, sort_by, prefetch))
    except TubescopeError as e:
        raise fail(e, title="Comments Failed")

    if as_json:
        console.print_json(page.model_dump_json(by_alias=True))
        return

    if not page.comments:
        console.print(
            Panel(
                "[yellow]No comments found[/yellow]",
                title="Comments",
                border_style="yellow",
            )
        )
        return

    title = page.total_count_text or f"{len(page.comments)} comments"
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("Author", style="cyan", width=20)
    table.add_column("Comment", style="white")
    table.add_column("Likes", style="green", justify="right", width=8)
    table.add_column("Replies", style="yellow", justify="right", width=8)
    table.add_column("Posted", style="dim", width=12)

    for comment in page.comments[:limit]:
        marker = ""
        if comment.is_pinned:
            marker += "📌 "
        if comment.is_hearted:
            marker += "♥ "
        table.add_row(
            comment.author.name,
            f"{marker}{comment.content}",
            comment.like_count_text or str(comment.like_count),
            str(comment.reply_count),
            comment.published_time_text,
        )

    console.print(table)
    if page.has_more:
        console.print("[dim]More comments are available.[/dim]")


@comments_app.command("token")
def show_token(
    video_id: str = typer.Argument(..., help="YouTube video ID"),
) -> None:
    """Fetch only the continuation token for a video."""

    async def run_token() -> CommentToken:
        return await CommentTokenPipeline().prefetch_token(video_id)

    try:
        token = asyncio.run(run_token())
    except TubescopeError as e:
        raise fail(e, title="Token Prefetch Failed")

    console.print_json(json.dumps(token.model_dump(by_alias=True)))
