"""Feeder pipeline endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from socialdesk.api.deps import get_settings
from socialdesk.config import Settings
from socialdesk.exceptions import FeederError
from socialdesk.schemas.feeder import FeederRunResponse
from socialdesk.services.feeder_service import run_feeder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feeder", tags=["feeder"])


@router.post("/run", response_model=FeederRunResponse)
async def run_feeder_endpoint(
    settings: Annotated[Settings, Depends(get_settings)],
) -> FeederRunResponse | JSONResponse:
    """Run the content feeder pipeline to completion."""
    try:
        log = await run_feeder(
            settings.feeder_command,
            settings.feeder_cwd,
            timeout=settings.feeder_timeout_seconds,
        )
    except FeederError as exc:
        logger.error("Feeder pipeline failed: %s", exc)
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})
    return FeederRunResponse(success=True, message="Feeder pipeline ran successfully.", log=log)
