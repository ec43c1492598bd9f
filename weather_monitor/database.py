"""
Async database engine and session handling.

The engine is built once from DATABASE_URL. Request handlers get a session
through the get_db dependency; startup and tests use create_tables and
drop_tables.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from weather_monitor.config import settings


def engine_options(url: str) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine suited to the backend."""
    options: Dict[str, Any] = {"echo": settings.DEBUG, "future": True}
    if url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        options["poolclass"] = NullPool
    else:
        options["pool_pre_ping"] = True
    return options


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Declarative base shared by every model
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency yielding one session per request.

    Whatever is still pending is committed after the handler returns and
    rolled back if it raised.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _load_models() -> None:
    # Registers every table on Base.metadata
    import weather_monitor.models  # noqa: F401


async def create_tables():
    """
    Create any missing tables.

    Runs at startup when AUTO_CREATE_TABLES is on. Deployments that manage
    the schema with `alembic upgrade head` turn it off.
    """
    _load_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables():
    """
    Drop every table.

    WARNING: This will delete all data. Use with caution.
    """
    _load_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
