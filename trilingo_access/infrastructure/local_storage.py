"""Local Storage Manager - async SQLite sessions with automatic rollback and error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to LocalStorageError (core/errors.py)
    - create_schema() is idempotent (create_all with checkfirst)

Design Decisions:
    - Instance owned by the access layer, not a module singleton: tests open their own file
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from trilingo_access.core.errors import LocalStorageError
from trilingo_access.db.base import Base
import trilingo_access.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)


class LocalStorage:
    """Manages async local storage sessions with rollback and health checks."""

    def __init__(self, storage_url: str):
        self.engine = create_async_engine(storage_url)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """Create local storage tables if missing."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Local storage schema creation failed: {e}")
            raise LocalStorageError("Could not create schema", "create_schema")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(
                f"Local storage {type(e).__name__}: {e}",
                extra={"error_type": type(e).__name__},
            )
            message = (
                "Storage file unavailable or locked" if isinstance(e, OperationalError)
                else "Storage operation failed"
            )
            raise LocalStorageError(message, "session") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check local storage is readable."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except LocalStorageError as e:
            logger.error(f"Local storage health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
