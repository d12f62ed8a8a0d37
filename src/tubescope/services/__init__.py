"""Service layer for tubescope."""

from tubescope.services.comments import CommentClient, CommentTokenPipeline
from tubescope.services.scraping import ChannelPageScraper, OEmbedClient, VideoPageScraper
from tubescope.services.video_service import VideoMetadataService

__all__ = [
    "ChannelPageScraper",
    "CommentClient",
    "CommentTokenPipeline",
    "OEmbedClient",
    "VideoMetadataService",
    "VideoPageScraper",
]
