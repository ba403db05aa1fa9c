# src/empservice/utils/database.py
from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from src.empservice.config import DatabaseInfo

logger = logging.getLogger(__name__)

# Base class for SQLAlchemy ORM models
Base = declarative_base()


# Failures of the store itself. Drivers such as asyncpg raise OSError for an
# unreachable server without SQLAlchemy wrapping it.
STORE_ERRORS = (SQLAlchemyError, OSError)


class DatabaseError(Exception):
    """Raised when the database cannot be opened or prepared at startup."""


class Database:
    """
    Owns the engine (and its connection pool) for one process.

    Built once at startup from the [database] section of the config and kept
    on ``app.state.db``; request handlers reach it through ``get_db``.
    """

    def __init__(self, info: DatabaseInfo):
        self.info = info
        self.engine: AsyncEngine | None = None
        self.sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> URL:
        return self.info.sqlalchemy_url()

    def _engine_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"echo": self.info.echo}
        backend = self.url.get_backend_name()
        if backend == "sqlite":
            # SQLite picks its own pool class; sizing arguments are rejected
            return kwargs
        kwargs.update(
            pool_size=max(self.info.connection_max, 1),  # bounded by connection_max
            max_overflow=0,
            pool_pre_ping=True,
        )
        if backend == "postgresql":
            kwargs["connect_args"] = {"timeout": self.info.timeout}  # asyncpg
        else:
            kwargs["connect_args"] = {"connect_timeout": self.info.timeout}  # aiomysql
        return kwargs

    async def open(self) -> None:
        """Create the engine, check connectivity and create missing tables."""
        if not self.info.enabled:
            logger.warning("database.enabled is false in config; connecting anyway")

        # make sure every model is registered on Base.metadata
        from src.empservice.models import employee  # noqa: F401

        try:
            self.engine = create_async_engine(self.url, **self._engine_kwargs())
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)
        except STORE_ERRORS as e:
            logger.error("Error opening database %s: %s", self._safe_url(), e)
            if self.engine is not None:
                await self.engine.dispose()
                self.engine = None
            raise DatabaseError(f"Database connection failed: {e}") from e

        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Connected to database: %s", self._safe_url())

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.sessionmaker = None
        logger.info("Database connections closed")

    def session(self) -> AsyncSession:
        if self.sessionmaker is None:
            raise DatabaseError("Database is not open")
        return self.sessionmaker()

    def _safe_url(self) -> str:
        try:
            return self.url.render_as_string(hide_password=True)
        except ArgumentError:
            return "<invalid url>"


# Dependency to retrieve a database session in FastAPI
# The session is closed after the request
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    db: Database = request.app.state.db
    async with db.session() as session:
        yield session
