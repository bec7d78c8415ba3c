"""Application context: the process-wide state built once at startup."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from db.session import create_engine, create_session_maker


@dataclass
class AppContext:
    """Settings, storage engine and session factory for one application instance."""

    settings: Settings
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = create_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_maker=create_session_maker(engine),
        )
