"""Database session management."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from groupgallery.core.config import settings
from groupgallery.core.logging import get_logger
from groupgallery.db.base import Base

logger = get_logger(__name__)


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def get_database_url() -> str:
    """Get the database URL, ensuring a SQLite file's directory exists."""
    url = settings.database_url
    if _is_sqlite(url):
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
    return url


def create_engine_for_url(url: str) -> AsyncEngine:
    """Create an async engine, applying SQLite concurrency settings when needed."""
    if not _is_sqlite(url):
        return create_async_engine(url, echo=settings.debug, future=True, pool_pre_ping=True)

    sqlite_engine = create_async_engine(
        url,
        echo=settings.debug,
        future=True,
        connect_args={
            "timeout": 30,  # Wait up to 30 seconds for locks
        },
    )

    @event.listens_for(sqlite_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Enable WAL mode so API reads don't block photo inserts."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=30000")
        cursor.close()

    return sqlite_engine


engine = create_engine_for_url(get_database_url())

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db(db_engine: AsyncEngine | None = None) -> bool:
    """Verify connectivity and create missing tables.

    A failure is logged and swallowed: the process keeps serving, and every
    database-backed operation fails on its own until storage comes back.

    Returns:
        True if the database is reachable and the schema is in place.
    """
    db_engine = db_engine or engine
    try:
        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        logger.error("database_unavailable", error=str(e), exc_info=True)
        return False
    logger.info("database_connected", backend=db_engine.url.get_backend_name())
    return True


async def check_db(session: AsyncSession) -> bool:
    """Run a trivial query to check the connection."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return False
    return True


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions.

    Yields:
        An async database session.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
