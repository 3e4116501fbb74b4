"""Group model for Telegram chats that have posted photos."""

from __future__ import annotations

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from groupgallery.db.base import Base

# Name stored for chats without a title (one-to-one conversations)
PRIVATE_CHAT_NAME = "Private"


class Group(Base):
    """A chat the bot has seen a photo from.

    The primary key is the Telegram chat id itself, so re-observing a chat
    updates the row in place.
    """

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
