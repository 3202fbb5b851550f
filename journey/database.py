"""
Journey Backend — Database Engine & Units of Work
==================================================

What:  Async SQLAlchemy engine wrapper, session factory and declarative Base.
Why:   The connection pool is the only process-wide shared resource. It is
       built explicitly at startup and handed to the store, never reached
       through a module global.
How:   `Database` owns an AsyncEngine and an async_sessionmaker. Callers open
       a session with `database.session()` and manage the transaction
       themselves, or use `database.unit_of_work()` which commits on success
       and rolls back on any error.
Who:   Constructed by the app lifespan; used by SqlTripStore and /health.

Connection Pooling Strategy:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

    SQLite (used by the test-suite) manages its own pool, so the sizing
    arguments are only passed to server databases.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from journey.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with one shared metadata object, which Alembic
    reads for migrations and the tests use for `create_all`.
    """
    pass


class Database:
    """
    Explicitly constructed handle on the connection pool.

    Lifecycle:
        1. Built once in the app lifespan (`Database.from_settings`)
        2. Shared by every request through the store
        3. Disposed on shutdown after detached tasks have drained
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: rows returned by the store stay readable
        # after their session has closed
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = make_url(settings.database_url)
        options = {"echo": settings.log_level == "DEBUG"}
        if url.get_backend_name() != "sqlite":
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        logger.info("Creating database engine for backend '%s'", url.get_backend_name())
        return cls(create_async_engine(url, **options))

    def session(self) -> AsyncSession:
        """Returns a new session; use it as an async context manager."""
        return self.session_factory()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[AsyncSession]:
        """
        Session wrapped in a single transaction.

        Commits when the block exits cleanly, rolls back on any exception and
        always returns the connection to the pool.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Round-trips `SELECT 1`; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Closes every pooled connection."""
        await self.engine.dispose()
