"""Serves images rendered by the agent from the output directory."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from socialdesk.api.deps import get_settings
from socialdesk.config import Settings
from socialdesk.publishing.registry import list_platforms

router = APIRouter(prefix="/api/image", tags=["images"])

_NO_STORE = {"Cache-Control": "no-store"}


@router.get("/social")
async def social_image_endpoint(
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileResponse:
    """Serve the combined social image."""
    path = settings.output_dir / "social_post.jpg"
    if not path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="social_post.jpg not found",
        )
    return FileResponse(path, media_type="image/jpeg", headers=_NO_STORE)


@router.get("/{platform}")
async def platform_image_endpoint(
    platform: str,
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileResponse:
    """Serve the image the agent rendered for one platform."""
    if platform not in list_platforms():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid platform",
        )
    path = settings.output_dir / f"{platform}.png"
    if not path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image for {platform} not found",
        )
    return FileResponse(path, media_type="image/png", headers=_NO_STORE)
