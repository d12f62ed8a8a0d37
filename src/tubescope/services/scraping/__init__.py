"""
YouTube page scraping services.

Extracts structured facts from raw YouTube HTML with ordered regex pattern
chains that degrade gracefully when the markup changes.

Modules
-------
pattern_chain
    Generic "first accepted match" extraction over ordered patterns.
json_extract
    Brace-balanced extraction of embedded ``ytInitialData`` JSON.
http
    Shared fetch and error mapping.
channel_scraper
    Channel page facts (name, subscribers, images, description, videos).
video_scraper
    Watch page metrics (views, likes, duration, upload date).
oembed_client
    oEmbed title/channel/thumbnail lookup.
"""

from tubescope.services.scraping.channel_scraper import ChannelPageScraper
from tubescope.services.scraping.oembed_client import OEmbedClient, extract_thumbnails
from tubescope.services.scraping.pattern_chain import FieldPattern, extract_field
from tubescope.services.scraping.video_scraper import VideoPageScraper, extract_like_count

__all__ = [
    "ChannelPageScraper",
    "FieldPattern",
    "OEmbedClient",
    "VideoPageScraper",
    "extract_field",
    "extract_like_count",
    "extract_thumbnails",
]
