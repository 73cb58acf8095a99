"""Feeder schemas."""

from __future__ import annotations

from pydantic import BaseModel


class FeederRunResponse(BaseModel):
    success: bool
    message: str
    log: str
