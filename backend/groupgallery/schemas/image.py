"""Pydantic schemas for Image API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from groupgallery.db.models import Image

# Public prefix the upload directory is mounted at
UPLOADS_URL_PREFIX = "/uploads"


class ImageResponse(BaseModel):
    """Schema for an image in list responses."""

    id: int
    filename: str
    url: str
    sender: str
    caption: str
    created_at: datetime
    group_id: int

    @classmethod
    def from_image(cls, image: Image) -> ImageResponse:
        return cls(
            id=image.id,
            filename=image.filename,
            url=f"{UPLOADS_URL_PREFIX}/{image.filename}",
            sender=image.sender or "",
            caption=image.caption or "",
            created_at=image.created_at,
            group_id=image.group_id,
        )
