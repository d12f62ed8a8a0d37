"""
CLI commands for scraping YouTube channel and watch pages.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from tubescope.cli.errors import fail
from tubescope.exceptions import TubescopeError
from tubescope.services.scraping.channel_scraper import ChannelPageScraper
from tubescope.services.video_service import VideoMetadataService
from tubescope.utils.numbers import format_abbreviated_number
from tubescope.utils.relative_time import format_relative_time

console = Console()

scrape_app = typer.Typer(
    name="scrape",
    help="Scrape channel and video pages",
    no_args_is_help=True,
)


@scrape_app.command("channel")
def scrape_channel(
    channel_id: str = typer.Argument(..., help="Channel ID (UC...) or @handle"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Scrape a channel page for name, subscribers, images and description."""
    try:
        data = asyncio.run(ChannelPageScraper().scrape_channel_page(channel_id))
    except TubescopeError as e:
        raise fail(e, title="Channel Scrape Failed")

    if as_json:
        console.print_json(data.model_dump_json())
        return

    table = Table(title=f"Channel {channel_id}", show_header=True, header_style="bold blue")
    table.add_column("Field", style="cyan", width=16)
    table.add_column("Value", style="white")

    table.add_row("Name", data.name or "-")
    subscribers = data.subscriber_text or format_abbreviated_number(data.subscriber_count)
    table.add_row("Subscribers", f"{subscribers} ({data.subscriber_count:,})")
    table.add_row("Videos", f"{data.video_count:,}" if data.video_count else "-")
    table.add_row("Avatar", data.avatar_url or "-")
    table.add_row("Banner", data.banner_url or "-")
    table.add_row("Description", data.description or "-")

    console.print(table)


@scrape_app.command("video")
def scrape_video(
    url_or_id: str = typer.Argument(..., help="Video URL or 11-character video ID"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Collect oEmbed data and watch-page metrics for a video."""
    try:
        metadata = asyncio.run(VideoMetadataService().get_video_metadata(url_or_id))
    except TubescopeError as e:
        raise fail(e, title="Video Lookup Failed")

    if as_json:
        console.print_json(metadata.model_dump_json())
        return

    table = Table(title=metadata.title, show_header=True, header_style="bold blue")
    table.add_column("Field", style="cyan", width=16)
    table.add_column("Value", style="white")

    table.add_row("Video ID", metadata.id)
    table.add_row("Channel", metadata.channel_name)
    table.add_row("Duration", metadata.duration)
    table.add_row("Views", f"{metadata.view_count:,}")
    table.add_row("Likes", metadata.like_text or f"{metadata.like_count:,}")
    uploaded = format_relative_time(metadata.upload_date)
    table.add_row("Uploaded", f"{metadata.upload_date} ({uploaded})" if uploaded else "-")
    table.add_row("Thumbnail", metadata.thumbnails.high or "-")

    console.print(table)
