"""Image listing API endpoint."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groupgallery.db import get_db
from groupgallery.db.models import Image
from groupgallery.schemas.error import ErrorResponse
from groupgallery.schemas.image import ImageResponse

router = APIRouter(prefix="/images", tags=["images"])

# datetime covers 1-9999; the last year has no following January
MIN_YEAR = 1
MAX_YEAR = 9998


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return ``[first of month, first of next month)`` as naive local datetimes."""
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def _is_blank(raw: str | None) -> bool:
    return raw is None or raw.strip() == ""


def _parse_int(name: str, raw: str | None, low: int | None = None, high: int | None = None) -> int | None:
    """Parse an optional integer query parameter; empty means absent."""
    if _is_blank(raw):
        return None
    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"{name} must be an integer") from None
    if (low is not None and value < low) or (high is not None and value > high):
        raise HTTPException(status_code=422, detail=f"{name} must be between {low} and {high}")
    return value


@router.get(
    "",
    response_model=list[ImageResponse],
    responses={500: {"model": ErrorResponse}},
)
async def list_images(
    group_id: str | None = Query(None, description="Only images from this chat"),
    month: str | None = Query(None, description="Month 1-12, used only together with year"),
    year: str | None = Query(None, description="Year 1-9998, used only together with month"),
    db: AsyncSession = Depends(get_db),
) -> list[ImageResponse]:
    """List images, most recent first.

    A month filter applies only when both ``month`` and ``year`` are given;
    either one alone is ignored.
    """
    group = _parse_int("group_id", group_id)

    query = select(Image)

    if group is not None:
        query = query.where(Image.group_id == group)

    # A lone month or year is not looked at
    if not _is_blank(month) and not _is_blank(year):
        start, end = month_bounds(
            _parse_int("year", year, MIN_YEAR, MAX_YEAR),
            _parse_int("month", month, 1, 12),
        )
        query = query.where(Image.created_at >= start, Image.created_at < end)

    query = query.order_by(Image.created_at.desc(), Image.id.desc())

    result = await db.execute(query)
    return [ImageResponse.from_image(image) for image in result.scalars().all()]
