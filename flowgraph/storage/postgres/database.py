"""
Async engine and session management for the workflow definition store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from flowgraph.config import get_settings
from flowgraph.config.settings import PostgresSettings
from flowgraph.storage.postgres.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the pooled async engine used by PostgresWorkflowRepository.

    init() must be awaited before the first session; close() disposes the pool.
    """

    def __init__(self, settings: Optional[PostgresSettings] = None):
        self._settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._engine

    async def init(self) -> None:
        """Create the engine and session factory from the postgres settings."""
        pg = self._settings or get_settings().postgres

        self._engine = create_async_engine(
            pg.url,
            pool_size=pg.pool_size,
            max_overflow=pg.max_overflow,
            pool_timeout=pg.pool_timeout,
            pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.debug(f"Database engine created for {pg.host}:{pg.port}/{pg.database}")

    async def close(self) -> None:
        if not self.is_initialized:
            return
        await self.engine.dispose()
        self._engine = None
        self._session_factory = None

    async def create_schema(self) -> None:
        """Create any missing workflow tables (migrations are the normal route)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Run a trivial query; False if the database cannot be reached."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session scoped to one unit of work.

        Commits when the block exits normally and rolls back if it raises.

        Usage:
            async with database.session() as session:
                session.add(row)
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
