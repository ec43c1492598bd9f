"""
Alembic migration environment.

Migrations run on a synchronous engine: the application's async driver
URL is swapped for its sync equivalent before connecting.
"""

import sys
import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# Make the weather_monitor package importable when alembic runs from the repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from weather_monitor.config import settings
from weather_monitor.database import Base
import weather_monitor.models  # noqa: F401 - registers users and search_history

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# async driver prefix -> sync driver prefix
SYNC_DRIVERS = {
    "postgresql+asyncpg://": "postgresql://",
    "postgres://": "postgresql://",
    "sqlite+aiosqlite://": "sqlite://",
}


def sync_database_url() -> str:
    """DATABASE_URL (env first, then settings) rewritten for a sync driver."""
    url = os.getenv("DATABASE_URL") or settings.DATABASE_URL
    for async_prefix, sync_prefix in SYNC_DRIVERS.items():
        if url.startswith(async_prefix):
            return sync_prefix + url[len(async_prefix):]
    return url


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting to a database."""
    context.configure(
        url=sync_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured database."""
    config.set_main_option("sqlalchemy.url", sync_database_url())

    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER most constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
