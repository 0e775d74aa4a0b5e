"""
Async engine and sessions for the index store.

DATABASE_URL picks the backend (postgresql+asyncpg://... for the managed
database). Without it the tasks write to a local SQLite file at DATABASE_PATH.
One engine per process (per event loop in tests); close_engine() disposes it.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config import settings
from .models import Base

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    return settings.DATABASE_URL or f"sqlite+aiosqlite:///{settings.DATABASE_PATH}"


async def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the engine on first use; later calls return the same one."""
    global _engine, _session_factory

    if _engine is None:
        url = database_url or get_database_url()
        # Credentials stay out of the log
        logger.info(f"Database: {url.split('@')[-1]}")
        _engine = create_async_engine(
            url,
            echo=settings.LOG_LEVEL == "DEBUG",
            connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
        )
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False, autoflush=False)
    return _engine


async def close_engine() -> None:
    global _engine, _session_factory

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database engine closed")


async def create_tables() -> None:
    """Create missing tables. Deployed databases are managed with Alembic."""
    engine = await init_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session that commits when the block exits cleanly and rolls back otherwise."""
    if _session_factory is None:
        await init_engine()

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session_dependency() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI Depends() wrapper around get_session."""
    async with get_session() as session:
        yield session
