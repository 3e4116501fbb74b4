"""Database models for Group Gallery."""

from groupgallery.db.models.group import PRIVATE_CHAT_NAME, Group
from groupgallery.db.models.image import Image

__all__ = [
    # Models
    "Group",
    "Image",
    # Constants
    "PRIVATE_CHAT_NAME",
]
