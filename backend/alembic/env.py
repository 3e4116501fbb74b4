"""Alembic environment for the groups/images schema.

Migrations run against ``DATABASE_URL`` through the application's own engine
factory, so SQLite databases get the same WAL and busy-timeout pragmas as
the running service.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from sqlalchemy.engine import Connection

from alembic import context

from groupgallery.db.base import Base
from groupgallery.db.models import Group, Image  # noqa: F401
from groupgallery.db.session import create_engine_for_url, get_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER most constraints in place
MIGRATION_OPTIONS = {"target_metadata": target_metadata, "render_as_batch": True}


def run_migrations_offline() -> None:
    """Emit the migration SQL for ``DATABASE_URL`` without connecting."""
    context.configure(
        url=get_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply migrations over an async connection."""
    engine = create_engine_for_url(get_database_url())
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
