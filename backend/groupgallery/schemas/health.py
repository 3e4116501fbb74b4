"""Health check schemas."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
    database: str  # "connected" or "disconnected"
    bot: str  # "running" or "stopped"
