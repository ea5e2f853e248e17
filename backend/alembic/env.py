"""
Alembic Migration Environment
==============================

What:  Runs Alembic against the Inkpress users/posts models.
How:   Settings (DATABASE_URL and friends) supplies the URL; online runs open
       an unpooled async engine and hand a sync connection to Alembic.
Who:   The `alembic` CLI (upgrade, downgrade, revision), run from backend/.

SQLite cannot ALTER most column definitions in place, so migrations run in
batch mode (copy-and-move tables) when DATABASE_URL points at SQLite.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from inkpress.config import Settings
from inkpress.database import Base
from inkpress.models import Post, User  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

settings = Settings()

_MIGRATION_OPTIONS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
    "render_as_batch": settings.is_sqlite,
}


def run_offline() -> None:
    """`alembic upgrade --sql`: print the DDL instead of executing it."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **_MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
