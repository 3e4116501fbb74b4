"""Group listing API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groupgallery.db import get_db
from groupgallery.db.models import Group
from groupgallery.schemas.error import ErrorResponse
from groupgallery.schemas.group import GroupResponse

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get(
    "",
    response_model=list[GroupResponse],
    responses={500: {"model": ErrorResponse}},
)
async def list_groups(
    db: AsyncSession = Depends(get_db),
) -> list[GroupResponse]:
    """List all groups ordered by name."""
    result = await db.execute(select(Group).order_by(Group.name.asc()))
    return [GroupResponse.model_validate(g) for g in result.scalars().all()]
