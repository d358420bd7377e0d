"""SQLAlchemy async engine and session management for the journal.

A :class:`Database` owns one engine and its session factory.  The API
creates it at startup from :class:`StorageConfig` and disposes of it on
shutdown; repositories only ever see :meth:`Database.session`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from trade_psychology.core.errors import StorageError

from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """Engine + session factory pair.

    Parameters
    ----------
    url:
        SQLAlchemy async URL, e.g. ``postgresql+asyncpg://user:pw@host/db``.
    pool_size:
        Persistent connections kept in the pool.  ``0`` disables pooling
        (short-lived processes, tests).
    echo:
        Log every emitted SQL statement.
    """

    def __init__(self, url: str, *, pool_size: int = 5, echo: bool = False) -> None:
        self._url = url
        self._pool_size = pool_size
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StorageError("Database not connected. Call connect() first.")
        return self._engine

    def connect(self) -> AsyncEngine:
        """Create the engine and session factory (idempotent)."""
        if self._engine is not None:
            return self._engine

        if self._pool_size <= 0:
            self._engine = create_async_engine(self._url, echo=self._echo, poolclass=NullPool)
        else:
            self._engine = create_async_engine(
                self._url,
                echo=self._echo,
                pool_size=self._pool_size,
                pool_recycle=1800,
            )
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(
            "Created async engine for %s (pool_size=%s)",
            self._url.split("@")[-1], self._pool_size,
        )
        return self._engine

    async def create_all(self) -> None:
        """Create all tables defined in the ORM metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created / verified.")

    async def dispose(self) -> None:
        """Release pooled connections and forget the engine."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Engine disposed.")
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session committed on success and rolled back on error."""
        if self._session_factory is None:
            raise StorageError("Database not connected. Call connect() first.")

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
