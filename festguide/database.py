"""
Async database access for the notification engine.

SQLAlchemy Core over asyncpg. Query functions in festguide.queries take an
AsyncConnection; the SQL stores open one per operation through the context
managers below.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .config import get_database_url, get_pool_size, is_sql_echo_enabled
from .tables import metadata  # noqa: F401 - exported for Alembic

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Get or create the shared async engine."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            get_database_url(),
            echo=is_sql_echo_enabled(),
            pool_size=get_pool_size(),
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,
        )
    return _engine


@asynccontextmanager
async def get_connection() -> AsyncGenerator[AsyncConnection, None]:
    """
    Read-only style connection. Nothing is committed unless the caller does.

    Usage:
        async with get_connection() as conn:
            rows = await list_notifications_for_user(conn, user_id, 50, 0)
    """
    async with get_engine().connect() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncConnection, None]:
    """Connection inside a transaction: commit on success, rollback on error."""
    async with get_engine().begin() as conn:
        yield conn


async def close_engine() -> None:
    """Dispose of the pool. Call on shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
