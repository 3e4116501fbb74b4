"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from groupgallery.core.config import settings
from groupgallery.db import get_db
from groupgallery.db.session import check_db
from groupgallery.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> HealthResponse:
    """Check application health.

    Returns:
        Health status, application version, database and bot state.
    """
    telegram = getattr(request.app.state, "telegram", None)
    return HealthResponse(
        status="ok",
        version=settings.version,
        database="connected" if await check_db(db) else "disconnected",
        bot="running" if telegram is not None and telegram.running else "stopped",
    )
