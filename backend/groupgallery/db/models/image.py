"""Image model for downloaded photo metadata."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from groupgallery.db.base import Base


class Image(Base):
    """Metadata for one photo stored under the upload directory."""

    __tablename__ = "images"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Local file and its Telegram origin
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_id: Mapped[str] = mapped_column(String(255), nullable=False)
    sender: Mapped[str] = mapped_column(String(255), default="")

    # chat_id and group_id always hold the same value; group_id is not a
    # foreign key so an image survives a failed group upsert
    chat_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    group_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    caption: Mapped[str] = mapped_column(Text, default="")

    # Server-local time; month filters are computed in the same clock
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    __table_args__ = (
        Index("ix_images_created_at", "created_at"),
        Index("ix_images_group_created", "group_id", "created_at"),
    )
