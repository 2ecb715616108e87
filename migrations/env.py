"""Alembic environment for the vocab trainer schema."""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from vocab_trainer.db import Base, get_database_url


config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _resolve_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_url()


def _configure(**options) -> None:
    # SQLite cannot ALTER most constraints in place.
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=_resolve_url().startswith("sqlite"),
        **options,
    )


def run_migrations_offline() -> None:
    """Emit migration SQL without a database connection."""
    _configure(url=_resolve_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply migrations through the application's async driver."""
    engine = create_async_engine(_resolve_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
