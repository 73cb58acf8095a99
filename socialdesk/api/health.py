"""Health check endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from socialdesk.api.deps import get_session
from socialdesk.publishing.registry import PLATFORMS, is_enabled
from socialdesk.services.settings_service import get_settings_map

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str
    platforms: dict[str, bool]


@router.get("/api/health", response_model=HealthResponse)
async def health_check(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """Report whether the settings store is readable and which platforms are enabled.

    An unreadable store yields ``degraded`` with every platform reported as disabled.
    """
    platforms = {platform.value: False for platform in PLATFORMS}
    try:
        settings_map = await get_settings_map(session)
    except Exception:
        logger.warning("Health check could not read agent settings", exc_info=True)
        return HealthResponse(
            status="degraded", version=VERSION, database="error", platforms=platforms
        )

    for platform, spec in PLATFORMS.items():
        platforms[platform.value] = is_enabled(spec, settings_map)
    return HealthResponse(status="ok", version=VERSION, database="ok", platforms=platforms)
