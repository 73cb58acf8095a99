"""Settings schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Bulk update of the key-value settings store."""

    values: dict[str, str] = Field(description="Settings to insert or replace, by key")


class SettingsResponse(BaseModel):
    """All stored settings."""

    values: dict[str, str]
