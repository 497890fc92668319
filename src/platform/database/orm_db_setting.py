"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine for the configured database URL
2. Base: declarative base shared by every model
3. Database: session provider injected into repositories through the DI container

PostgreSQL (asyncpg) in production; a file-backed SQLite (aiosqlite) URL can be
configured through DATABASE_URL_OVERRIDE for local runs and repository tests.
Both support UPDATE ... RETURNING, which the admission transition relies on.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith('sqlite'):
        return {'echo': False}
    return {
        'echo': False,
        'pool_size': settings.DB_POOL_SIZE,
        'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
        'pool_timeout': settings.DB_POOL_TIMEOUT,
        'pool_recycle': settings.DB_POOL_RECYCLE,
        'pool_pre_ping': settings.DB_POOL_PRE_PING,
    }


class AsyncEngineManager:
    """
    Keeps the engine bound to the current event loop.

    Recreates the engine when the running loop changes to prevent
    "Task got Future attached to a different loop" errors (pytest-asyncio
    runs every test in a fresh loop).
    """

    def __init__(self, url: str | None = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop running, create engine without loop tracking
            if self._engine is None:
                self._engine = create_async_engine(self.url, **_engine_kwargs(self.url))
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, disposing old engine...')
                self._session_maker = None

            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = create_async_engine(self.url, **_engine_kwargs(self.url))
            self._loop = current_loop

        return self._engine  # type: ignore[return-value]

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._loop = None
        self._session_maker = None


# Global engine manager
_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


class Base(DeclarativeBase):
    pass


async def create_db_and_tables(engine: AsyncEngine | None = None) -> None:
    """Create database tables if they don't exist"""
    # Register every model on Base.metadata
    import src.service.admission.driven_adapter.model  # noqa: F401

    current_engine = engine or get_engine()
    async with current_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    Logger.base.info('🗄️  [DB] Tables ensured')


async def drop_db_and_tables(engine: AsyncEngine | None = None) -> None:
    import src.service.admission.driven_adapter.model  # noqa: F401

    current_engine = engine or get_engine()
    async with current_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


class Database:
    """
    Session provider for dependency injection.

    Uses the global engine manager unless a URL is given, in which case the
    instance owns its engine (repository tests point it at a temporary file).
    """

    def __init__(self, *, url: str | None = None) -> None:
        self._engine_manager = AsyncEngineManager(url) if url else _engine_manager

    @property
    def engine(self) -> AsyncEngine:
        return self._engine_manager.get_engine()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Note: Automatically handles rollback on exception
        """
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session

    async def create_all(self) -> None:
        await create_db_and_tables(self.engine)

    async def dispose(self) -> None:
        await self._engine_manager.dispose()
