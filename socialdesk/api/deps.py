"""Shared API dependencies: settings, DB session, publish options."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from socialdesk.config import Settings
from socialdesk.publishing.base import PublishOptions


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Get a database session."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


def get_publish_options(request: Request) -> PublishOptions:
    """Build publisher options from the application settings."""
    return PublishOptions.from_settings(get_settings(request))
