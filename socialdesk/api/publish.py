"""Publishing API endpoints."""

from __future__ import annotations

import json
import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialdesk.api.deps import get_publish_options, get_session, get_settings
from socialdesk.config import Settings
from socialdesk.exceptions import PostNotFoundError, PublishError
from socialdesk.publishing.base import PublishOptions
from socialdesk.publishing.registry import list_platforms
from socialdesk.schemas.publish import (
    ConnectionCheckResponse,
    PlatformResultResponse,
    PublishRequest,
    PublishResponse,
)
from socialdesk.services.publish_service import check_platform_connection, publish_post

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/publish", tags=["publish"])


@router.post("", response_model=PublishResponse)
async def publish_endpoint(
    body: PublishRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    options: Annotated[PublishOptions, Depends(get_publish_options)],
) -> PublishResponse:
    """Publish a stored post to the requested platforms."""
    try:
        outcome = await publish_post(
            session,
            body.post_id,
            [platform.value for platform in body.platforms],
            options=options,
            public_base_url=settings.public_base_url,
        )
    except PostNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        ) from exc

    return PublishResponse(
        success=outcome.success,
        results={
            platform: PlatformResultResponse(
                success=result.success,
                post_id=result.post_id,
                error=result.error,
            )
            for platform, result in outcome.results.items()
        },
        published_to=outcome.published_to,
    )


@router.get("", response_model=ConnectionCheckResponse)
async def check_connection_endpoint(
    session: Annotated[AsyncSession, Depends(get_session)],
    options: Annotated[PublishOptions, Depends(get_publish_options)],
    platform: Annotated[str | None, Query()] = None,
) -> ConnectionCheckResponse:
    """Verify the configured credentials of one platform."""
    if not platform:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="platform query param required",
        )

    if platform not in list_platforms():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unknown platform",
        )

    try:
        info = await check_platform_connection(session, platform, options=options)
    except (PublishError, httpx.HTTPError, json.JSONDecodeError) as exc:
        logger.warning("Connection check for %s failed: %s", platform, exc)
        return ConnectionCheckResponse(success=False, error=str(exc) or type(exc).__name__)

    return ConnectionCheckResponse(success=True, info=info)
