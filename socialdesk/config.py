"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SocialDesk application settings.

    Platform credentials are not fields here: they are resolved per request
    from the process environment with the settings table as fallback
    (see ``socialdesk.publishing.credentials``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    debug: bool = False
    expose_docs: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///data/db/socialdesk.db"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=list)

    # Agent output
    output_dir: Path = Path("../output")
    public_base_url: str = ""
    langgraph_url: str = "http://127.0.0.1:2024"

    # Feeder pipeline
    feeder_command: list[str] = Field(
        default_factory=lambda: ["uv", "run", "python", "-m", "feeder.pipeline"]
    )
    feeder_cwd: Path = Path("..")
    feeder_timeout_seconds: float = Field(default=300.0, gt=0)

    # External APIs
    graph_api_url: str = "https://graph.facebook.com/v21.0"
    twitter_api_url: str = "https://api.twitterapi.io"
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # Instagram container polling
    instagram_poll_attempts: int = Field(default=20, ge=1)
    instagram_poll_interval: float = Field(default=3.0, ge=0)
