"""Post API endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialdesk.api.deps import get_session, get_settings
from socialdesk.config import Settings
from socialdesk.exceptions import (
    AgentOutputNotFoundError,
    AgentUnavailableError,
    PostNotFoundError,
)
from socialdesk.schemas.post import AgentPostResponse, PostImportRequest, SocialPostResponse
from socialdesk.services.agent_output import ParsedSocialPost, fetch_latest_agent_posts
from socialdesk.services.post_service import create_post, delete_post, get_post, list_posts

router = APIRouter(prefix="/api/posts", tags=["posts"])


async def _latest_agent_posts(settings: Settings) -> ParsedSocialPost:
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        try:
            return await fetch_latest_agent_posts(client, settings.langgraph_url)
        except AgentUnavailableError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=str(exc),
            ) from exc
        except AgentOutputNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(exc),
            ) from exc


@router.get("", response_model=list[SocialPostResponse])
async def list_posts_endpoint(
    session: Annotated[AsyncSession, Depends(get_session)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[SocialPostResponse]:
    """List stored posts, newest first."""
    posts = await list_posts(session, limit=limit)
    return [SocialPostResponse.model_validate(post) for post in posts]


@router.get("/agent/latest", response_model=AgentPostResponse)
async def latest_agent_posts_endpoint(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AgentPostResponse:
    """Parse the posts of the most recent agent run without storing them."""
    parsed = await _latest_agent_posts(settings)
    return AgentPostResponse(**asdict(parsed))


@router.post("/import", response_model=SocialPostResponse, status_code=201)
async def import_posts_endpoint(
    body: PostImportRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SocialPostResponse:
    """Store the posts of the most recent agent run."""
    parsed = await _latest_agent_posts(settings)
    post = await create_post(session, parsed, image_url=body.image_url)
    return SocialPostResponse.model_validate(post)


@router.get("/{post_id}", response_model=SocialPostResponse)
async def get_post_endpoint(
    post_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SocialPostResponse:
    """Get a single post."""
    try:
        post = await get_post(session, post_id)
    except PostNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        ) from exc
    return SocialPostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=204)
async def delete_post_endpoint(
    post_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete a post."""
    deleted = await delete_post(session, post_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
