"""Database package for Group Gallery."""

from groupgallery.db.base import Base
from groupgallery.db.session import async_session_maker, engine, get_db, init_db

__all__ = [
    "Base",
    "async_session_maker",
    "engine",
    "get_db",
    "init_db",
]
