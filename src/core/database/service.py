"""
Async engine and transaction scope for Brood's SQL store.

`DatabaseService` owns one AsyncEngine per process. Game state is only
written through `get_transaction()`, which commits when the block exits
cleanly and rolls back when it raises; callers never commit by hand.

SQLite URLs (and test runs) use NullPool. Server databases use QueuePool
sized from Config.

>>> async with DatabaseService.get_transaction() as session:
...     record = await session.get(CreatureRecord, creature_id, with_for_update=True)
...     record.hunger = 100.0
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, QueuePool

from src.core.config.config import Config
from src.core.database.base import metadata
from src.core.logging.logger import get_logger

logger = get_logger(__name__)


class DatabaseInitializationError(RuntimeError):
    """Raised when the engine cannot be created from the configured URL."""


class DatabaseNotInitializedError(RuntimeError):
    """Raised when a session is requested before `initialize()`."""


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool settings for a URL. SQLite files and test runs get NullPool."""
    if url.startswith("sqlite") or Config.is_testing():
        return {"echo": Config.DATABASE_ECHO, "poolclass": NullPool}
    return {
        "echo": Config.DATABASE_ECHO,
        "poolclass": QueuePool,
        "pool_size": Config.DATABASE_POOL_SIZE,
        "max_overflow": Config.DATABASE_MAX_OVERFLOW,
        "pool_recycle": Config.DATABASE_POOL_RECYCLE,
    }


def _scheme(url: str) -> str:
    return url.split(":", 1)[0] if ":" in url else "unknown"


class DatabaseService:
    """
    Process-wide async engine and session factory.

    Public API
    ----------
    - initialize(url=None) -> Create engine and session factory (idempotent)
    - shutdown() -> Dispose engine; safe to call repeatedly
    - create_all() -> Create every registered table
    - get_transaction() -> Atomic session: commit on success, rollback on error
    - health_check() -> `SELECT 1`, returns a bool
    """

    _engine: Optional[AsyncEngine] = None
    _session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    _lock: asyncio.Lock = asyncio.Lock()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    @classmethod
    async def initialize(cls, url: Optional[str] = None) -> None:
        """
        Create the engine for `url` (defaults to Config.DATABASE_URL).

        Raises
        ------
        DatabaseInitializationError
            If no URL is configured or engine creation fails.
        """
        async with cls._lock:
            if cls._engine is not None:
                logger.debug("DatabaseService already initialized; skipping")
                return

            database_url = url or Config.DATABASE_URL
            if not isinstance(database_url, str) or not database_url:
                logger.error("DATABASE_URL is not configured or invalid")
                raise DatabaseInitializationError(
                    "DATABASE_URL must be configured as a non-empty string"
                )

            options = _engine_options(database_url)
            try:
                cls._engine = create_async_engine(database_url, **options)
            except Exception as exc:
                logger.error(
                    "DatabaseService initialization failed",
                    extra={"url_scheme": _scheme(database_url), "error_type": type(exc).__name__},
                    exc_info=True,
                )
                raise DatabaseInitializationError(
                    f"Database initialization failed: {exc}"
                ) from exc

            cls._session_factory = async_sessionmaker(
                bind=cls._engine, class_=AsyncSession, expire_on_commit=False
            )
            logger.info(
                "DatabaseService initialized",
                extra={
                    "url_scheme": _scheme(database_url),
                    "pool_class": options["poolclass"].__name__,
                },
            )

    @classmethod
    async def shutdown(cls) -> None:
        async with cls._lock:
            engine, cls._engine, cls._session_factory = cls._engine, None, None
            if engine is None:
                return
            await engine.dispose()
            logger.info("DatabaseService shutdown complete")

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._engine is not None

    @classmethod
    async def create_all(cls) -> None:
        """Create all tables registered on `SQLModel.metadata`."""
        engine = cls._require_engine()

        # Registers every model on SQLModel.metadata
        import src.database.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

        logger.info("Database schema created", extra={"tables": sorted(metadata.tables)})

    @classmethod
    async def health_check(cls) -> bool:
        if cls._engine is None:
            logger.warning("Health check called on uninitialized DatabaseService")
            return False

        try:
            async with cls._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (OperationalError, DBAPIError) as exc:
            logger.warning(
                "Database health check failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            return False
        return True

    # ========================================================================
    # Sessions
    # ========================================================================

    @classmethod
    def _require_engine(cls) -> AsyncEngine:
        if cls._engine is None or cls._session_factory is None:
            logger.error("DatabaseService used before initialization")
            raise DatabaseNotInitializedError(
                "DatabaseService must be initialized before use. "
                "Call DatabaseService.initialize() during startup."
            )
        return cls._engine

    @classmethod
    @asynccontextmanager
    async def get_transaction(cls) -> AsyncGenerator[AsyncSession, None]:
        """
        Session wrapped in one atomic transaction.

        Raises
        ------
        DatabaseNotInitializedError
            If DatabaseService has not been initialized.
        """
        cls._require_engine()
        assert cls._session_factory is not None

        started = time.perf_counter()
        async with cls._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as exc:
                await session.rollback()
                logger.warning(
                    "Transaction rolled back",
                    extra={
                        "error_type": type(exc).__name__,
                        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                    },
                )
                raise
            logger.debug(
                "Transaction committed",
                extra={"duration_ms": round((time.perf_counter() - started) * 1000.0, 2)},
            )
