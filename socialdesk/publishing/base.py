"""Base protocol and data classes for platform publishing."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from socialdesk.exceptions import RemoteRejectionError

if TYPE_CHECKING:
    from socialdesk.config import Settings

GRAPH_API_URL = "https://graph.facebook.com/v21.0"
TWITTER_API_URL = "https://api.twitterapi.io"

SettingWriter = Callable[[str, str], Awaitable[None]]
"""Coroutine that upserts one key of the settings store."""


class Platform(StrEnum):
    """Supported social platforms."""

    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"


@dataclass
class PublishContent:
    """Content to be published to a single platform."""

    text: str
    image_url: str | None = None


@dataclass
class PublishResult:
    """Outcome of publishing to one platform. Never partially applied."""

    platform: str
    success: bool
    post_id: str | None = None
    error: str | None = None


@dataclass
class PublishOptions:
    """Endpoints and polling limits shared by all publishers."""

    graph_api_url: str = GRAPH_API_URL
    twitter_api_url: str = TWITTER_API_URL
    instagram_poll_attempts: int = 20
    instagram_poll_interval: float = 3.0
    http_timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> PublishOptions:
        return cls(
            graph_api_url=settings.graph_api_url.rstrip("/"),
            twitter_api_url=settings.twitter_api_url.rstrip("/"),
            instagram_poll_attempts=settings.instagram_poll_attempts,
            instagram_poll_interval=settings.instagram_poll_interval,
            http_timeout=settings.http_timeout_seconds,
        )


@runtime_checkable
class Publisher(Protocol):
    """Protocol for platform-specific publishers.

    ``publish`` returns the external post id or raises ``PublishError``.
    ``check`` verifies connectivity and returns a short human-readable summary.
    """

    platform: Platform

    async def publish(self, content: PublishContent) -> str:
        ...

    async def check(self) -> str:
        ...


PublisherFactory = Callable[
    [httpx.AsyncClient, dict[str, str], PublishOptions, SettingWriter], Publisher
]


def graph_error_message(data: Any) -> str | None:
    """Return the error message of a Graph API payload, or None if it has no error."""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if not error:
        return None
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)


def raise_for_graph_error(data: Any, prefix: str) -> None:
    """Raise ``RemoteRejectionError`` if a Graph API payload carries an error."""
    message = graph_error_message(data)
    if message is not None:
        raise RemoteRejectionError(f"{prefix}: {message}")
