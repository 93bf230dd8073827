"""Async database engine and session management."""

from collections.abc import AsyncGenerator
from typing import Any

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.settings import DatabaseConfig

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    """Enable foreign keys and WAL journaling on every new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """Owns the engine and session factory for one database.

    Constructed by the application lifespan (or by tests) and handed to
    request handlers through ``get_async_session``.
    """

    def __init__(self, config: DatabaseConfig, echo: bool = False) -> None:
        self.config = config
        self.engine: AsyncEngine = create_async_engine(config.url, echo=echo)
        event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragmas)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create any missing tables."""
        path = self.config.file_path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready", path=str(path) if path else ":memory:")

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session bound to the application's database.

    Everything a request writes is committed together on success and rolled
    back together on error.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
