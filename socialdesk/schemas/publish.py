"""Publishing schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from socialdesk.publishing.base import Platform


class PublishRequest(BaseModel):
    """Request to publish a stored post."""

    post_id: str = Field(min_length=1, description="Identifier of the post to publish")
    platforms: list[Platform] = Field(
        min_length=1, description="Platforms to publish to: facebook, instagram, twitter"
    )


class PlatformResultResponse(BaseModel):
    """Outcome for one platform."""

    success: bool
    post_id: str | None = None
    error: str | None = None


class PublishResponse(BaseModel):
    """Aggregate outcome of a publish request."""

    success: bool
    results: dict[str, PlatformResultResponse]
    published_to: dict[str, bool]


class ConnectionCheckResponse(BaseModel):
    """Result of verifying a platform's credentials."""

    success: bool
    info: str | None = None
    error: str | None = None
