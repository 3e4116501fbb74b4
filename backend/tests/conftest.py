"""Pytest configuration and fixtures."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Create a temporary directory for test paths
_test_tmp_dir = tempfile.mkdtemp(prefix="groupgallery_test_")
_test_upload_dir = Path(_test_tmp_dir) / "uploads"
_test_upload_dir.mkdir(parents=True, exist_ok=True)

# Set config BEFORE importing app modules
os.environ["UPLOAD_DIR"] = str(_test_upload_dir)
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_test_tmp_dir) / 'test_groupgallery.db'}"
for _name in ("TELEGRAM_BOT_TOKEN", "USE_WEBHOOK", "BOT_PUBLIC_URL", "WEBHOOK_SECRET"):
    os.environ.pop(_name, None)

from groupgallery.db import get_db  # noqa: E402
from groupgallery.db.base import Base  # noqa: E402
from groupgallery.main import app  # noqa: E402


@pytest.fixture
async def db_engine():
    """Create an in-memory test database engine."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Create a test client with overridden database dependency."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    """Per-test upload directory."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp directories after test session."""
    if Path(_test_tmp_dir).exists():
        shutil.rmtree(_test_tmp_dir, ignore_errors=True)
