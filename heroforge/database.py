"""
Database configuration for HeroForge.

This module provides database connection, session management, the
transaction helper used by every multi-row write, and schema creation.

Database initialization is LAZY: the engine is built from configuration
on first use and fails loudly if the configured URL is not supported.
"""

import threading
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .exceptions import ValidationError
from .structured_logging.enhanced_logging_config import get_logger
from .utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Thread-safe singleton for database management.

    Manages database engine, session maker, and URL with proper
    initialization and thread safety.
    """

    _instance: "DatabaseManager | None" = None
    _lock: threading.Lock = threading.Lock()

    def __init__(self) -> None:
        if DatabaseManager._instance is not None:
            raise RuntimeError("Use DatabaseManager.get_instance()")

        self.engine: AsyncEngine | None = None
        self.session_maker: async_sessionmaker[AsyncSession] | None = None
        self.database_url: str | None = None
        self._initialized: bool = False

    @classmethod
    def get_instance(cls) -> "DatabaseManager":
        """Get the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton for testing."""
        with cls._lock:
            cls._instance = None

    def _initialize_database(self) -> None:
        """
        Initialize database engine and session maker from configuration.

        Raises:
            ValidationError: If the configured URL is not SQLite or PostgreSQL
        """
        if self._initialized:
            return

        from .config import get_config

        context = create_error_context()
        context.metadata["operation"] = "database_initialization"

        config = get_config()
        database_url = config.database.url

        engine_kwargs: dict[str, Any] = {"echo": config.database.echo}
        if database_url.startswith("sqlite"):
            if not database_url.startswith("sqlite+aiosqlite"):
                database_url = database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
            if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:"):
                # In-memory databases live as long as their single connection
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
        elif database_url.startswith("postgresql"):
            if not database_url.startswith("postgresql+asyncpg"):
                database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
            engine_kwargs.update(
                {
                    "pool_pre_ping": True,
                    "pool_size": config.database.pool_size,
                    "max_overflow": config.database.max_overflow,
                    "pool_timeout": config.database.pool_timeout,
                }
            )
        else:
            log_and_raise(
                ValidationError,
                f"Unsupported database URL: {database_url}",
                context=context,
                user_friendly="Database configuration error - SQLite or PostgreSQL required",
            )

        self.database_url = database_url
        self.engine = create_async_engine(database_url, **engine_kwargs)
        if database_url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        logger.info("Database engine created", dialect=self.engine.dialect.name)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._initialized = True

    def get_engine(self) -> AsyncEngine:
        """
        Get the database engine, initializing if necessary.

        Raises:
            ValidationError: If database cannot be initialized
        """
        if not self._initialized:
            self._initialize_database()
        assert self.engine is not None, "Database engine not initialized"
        return self.engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        """
        Get the async session maker, initializing if necessary.

        Raises:
            ValidationError: If database cannot be initialized
        """
        if not self._initialized:
            self._initialize_database()
        assert self.session_maker is not None, "Session maker not initialized"
        return self.session_maker

    async def close(self) -> None:
        """Close database connections."""
        if self.engine is not None:
            engine = self.engine
            try:
                await engine.dispose()
                logger.info("Database connections closed")
            finally:
                self.engine = None
                self.session_maker = None
                self._initialized = False
        else:
            self._initialized = False


def get_database_manager() -> DatabaseManager:
    """Get the database manager singleton."""
    return DatabaseManager.get_instance()


def get_engine() -> AsyncEngine:
    """Get the database engine, initializing if necessary."""
    return get_database_manager().get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the async session maker, initializing if necessary."""
    return get_database_manager().get_session_maker()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.

    Yields:
        AsyncSession: Database session for async operations
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
        except Exception as e:
            logger.error("Database session error", error=str(e), error_type=type(e).__name__)
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as one atomic unit.

    Commits when the block finishes. Any exception raised inside the block
    rolls back every write made in it, including reads-then-writes that
    began before entering, and is re-raised unchanged.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise


async def init_db() -> None:
    """
    Initialize the database connection and create any missing tables.

    Raises:
        ValidationError: If the database cannot be initialized
    """
    logger.info("Initializing database connection")

    from sqlalchemy.orm import configure_mappers

    # Registers every model on the shared metadata
    from .models import Base

    configure_mappers()

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text("SELECT 1"))

    logger.info("Database initialization complete", tables=sorted(Base.metadata.tables))


async def close_db() -> None:
    """Close database connections."""
    logger.info("Closing database connections")
    await get_database_manager().close()
