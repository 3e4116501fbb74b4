"""Pydantic schemas for Group API."""

from __future__ import annotations

from pydantic import BaseModel


class GroupResponse(BaseModel):
    """Schema for a group in list responses."""

    id: int
    name: str

    model_config = {"from_attributes": True}
