"""
Async engine and session management.

Votes live in a single embedded SQLite file. The engine and session factory
are created once per application (see core.context.AppContext) and sessions
are handed to request handlers through the get_db dependency.
"""

from typing import Any, AsyncGenerator

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from core.config import Settings
from db.base import Base

logger = structlog.get_logger(__name__)

# Seconds a writer waits on a locked SQLite file before giving up
SQLITE_BUSY_TIMEOUT = 15


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured storage location."""
    url = make_url(settings.DATABASE_URL)
    is_sqlite = url.get_backend_name() == "sqlite"

    engine = create_async_engine(
        url,
        echo=settings.DATABASE_ECHO,
        connect_args={"timeout": SQLITE_BUSY_TIMEOUT} if is_sqlite else {},
    )
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragmas)
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create tables and indexes. Safe to run on every startup."""
    import models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized", url=engine.url.render_as_string(hide_password=True))


async def close_db(engine: AsyncEngine) -> None:
    await engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session bound to this application's engine.

    Services commit explicitly; anything left uncommitted when the request
    fails is rolled back here.
    """
    session_maker = request.app.state.context.session_maker
    async with session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
