"""
Database handle for the reporting engine.

One `Database` is built at process start and passed by reference into the
repositories and services that need the store; it owns the engine and its
connection pool for the lifetime of the process.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from pg_reporting.config.settings import Settings, settings as default_settings
from pg_reporting.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Async engine plus session factory"""

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs):
        self.url = url

        if url.startswith("sqlite"):
            # single shared connection so in-memory databases survive across sessions
            engine_kwargs.pop("pool_size", None)
            engine_kwargs.pop("max_overflow", None)
            engine_kwargs.setdefault("poolclass", StaticPool)
            if not engine_kwargs.get("connect_args"):
                engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)
            engine_kwargs.setdefault("pool_recycle", 3600)

        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(f"Created async database engine: {self.engine.dialect.name}")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        """Build the process-wide handle from application settings"""
        config = config or default_settings
        return cls(
            config.get_database_url(),
            echo=config.DB_ECHO,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_POOL_OVERFLOW,
            connect_args=config.DB_CONNECT_ARGS,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session scope; rolls back on error, always closes"""
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {str(e)}")
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self) -> None:
        """
        Create all tables.

        Suitable for development and tests; production schemas are managed
        by migrations.
        """
        # registers every model on Base.metadata
        import pg_reporting.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def drop_all(self) -> None:
        """Drop all tables. Development and tests only."""
        import pg_reporting.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("All database tables dropped")

    async def dispose(self) -> None:
        await self.engine.dispose()
