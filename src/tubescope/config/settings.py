"""
Application settings and configuration management.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from tubescope import __version__

DESKTOP_CHROME_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="tubescope")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Upstream endpoints
    youtube_base_url: str = Field(default="https://www.youtube.com")
    oembed_url: str = Field(default="https://www.youtube.com/oembed")
    comments_endpoint_url: str = Field(
        default="http://localhost:54321/functions/v1/youtube-comments"
    )

    # Request headers
    user_agent: str = Field(default=DESKTOP_CHROME_USER_AGENT)
    accept_language: str = Field(default="ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7")
    consent_cookie: str = Field(default="CONSENT=YES+cb.20210328-17-p0.en+FX+100")
    page_locale: str = Field(default="ko")
    page_region: str = Field(default="KR")

    # Performance
    request_timeout: float = Field(default=30.0)
    scrape_yield_delay: float = Field(default=0.005)  # seconds between extraction steps
    comment_cache_ttl_seconds: int = Field(default=600)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("request_timeout", "scrape_yield_delay")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Reject negative durations."""
        if v < 0:
            raise ValueError(f"Value must be non-negative, got {v}")
        return v

    @field_validator("youtube_base_url", "oembed_url", "comments_endpoint_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize endpoint URLs so paths can be appended."""
        return v.rstrip("/")

    @property
    def page_query_params(self) -> dict[str, str]:
        """Query parameters that pin the page language and region."""
        return {
            "hl": self.page_locale,
            "persist_hl": "1",
            "gl": self.page_region,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
