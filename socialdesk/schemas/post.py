"""Post schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SocialPostResponse(BaseModel):
    """A stored social post."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    twitter: str
    instagram: str
    facebook: str
    sources: list[str] = Field(default_factory=list)
    image_url: str | None = None
    images: dict[str, bool] = Field(default_factory=dict)
    published_to: dict[str, bool] = Field(default_factory=dict)
    created_at: datetime


class AgentPostResponse(BaseModel):
    """Posts parsed from the latest agent run, not yet stored."""

    title: str
    twitter: str
    instagram: str
    facebook: str
    sources: list[str]
    images: dict[str, bool]


class PostImportRequest(BaseModel):
    """Request to store the latest agent output as a post."""

    image_url: str | None = Field(
        default=None, description="Public URL of the image to publish with the post"
    )
