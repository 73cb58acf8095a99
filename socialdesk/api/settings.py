"""Settings API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from socialdesk.api.deps import get_session
from socialdesk.publishing.credentials import credential_env_status
from socialdesk.schemas.settings import SettingsResponse, SettingsUpdate
from socialdesk.services.settings_service import get_settings_map, mask_secrets, update_settings

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings", response_model=SettingsResponse)
async def get_settings_endpoint(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SettingsResponse:
    """Return all stored settings with secret credentials masked."""
    return SettingsResponse(values=mask_secrets(await get_settings_map(session)))


@router.put("/settings", response_model=SettingsResponse)
async def update_settings_endpoint(
    body: SettingsUpdate,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SettingsResponse:
    """Insert or replace settings by key."""
    values = await update_settings(session, body.values)
    return SettingsResponse(values=mask_secrets(values))


@router.get("/social-settings")
async def social_settings_endpoint() -> dict[str, bool | str | None]:
    """Report which platform credentials are supplied by the environment."""
    return credential_env_status()
