"""Async SQLAlchemy engine and session management.

Usage:
    db = Database(settings.DATABASE_URL)
    await db.create_schema()

    async with db.session() as session:
        entry = await session.get(WatchlistEntry, 1)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..services.errors import StoreError
from ..utils.logger import log
from .orm import Base

logger = log


def get_async_database_url(url: str) -> str:
    """Convert a database URL to its SQLAlchemy async driver form.

    postgres://... and postgresql://... become postgresql+asyncpg://...,
    sqlite://... becomes sqlite+aiosqlite://...
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    def __init__(self, url: str, echo: bool = False):
        self.url = get_async_database_url(url)
        self.engine = create_async_engine(self.url, echo=echo)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_schema(self):
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreError(f"Schema creation failed: {e}") from e
        logger.info("Database schema ready")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; driver and connectivity failures surface as StoreError."""
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error: {e}")
                raise StoreError(f"Database error: {e}") from e

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database connections closed")
