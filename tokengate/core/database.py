"""
Database configuration and session management.
Uses SQLAlchemy 2.0 with async support.
"""

from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine
)

from .config import settings, DatabaseConfig
from .logging import get_logger

logger = get_logger(__name__)

# Global engine and session maker
async_engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


async def init_database(url: Optional[str] = None) -> None:
    """Initialize database connections and session makers."""
    global async_engine, async_session_maker

    database_url = DatabaseConfig.get_database_url(url)
    logger.info("Initializing database connections", backend=database_url.split(":", 1)[0])

    sqlite_path = DatabaseConfig.get_sqlite_path(database_url)
    if sqlite_path is not None:
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    async_engine = create_async_engine(
        database_url,
        **DatabaseConfig.get_engine_config(database_url),
        echo=settings.debug
    )

    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    logger.info("Database connections initialized")


async def close_database() -> None:
    """Close database connections."""
    global async_engine, async_session_maker

    logger.info("Closing database connections")

    if async_engine:
        await async_engine.dispose()

    async_engine = None
    async_session_maker = None

    logger.info("Database connections closed")


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get an async database session with automatic cleanup.

    Usage:
        async with get_async_session() as session:
            # Use session here
            pass
    """
    if not async_session_maker:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Dependency for FastAPI
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session, committed when the route returns."""
    async with get_async_session() as session:
        yield session


class DatabaseManager:
    """Schema and connectivity operations used at startup and by the CLI."""

    @staticmethod
    async def _run_metadata(operation: str) -> None:
        from tokengate.models.base import Base
        import tokengate.models  # noqa: F401  registers users and claim_locks

        if not async_engine:
            raise RuntimeError("Database not initialized")

        async with async_engine.begin() as conn:
            await conn.run_sync(getattr(Base.metadata, operation))

    @staticmethod
    async def create_tables() -> None:
        """Create the gateway tables if they are missing."""
        await DatabaseManager._run_metadata("create_all")
        logger.info("Database tables ready")

    @staticmethod
    async def drop_tables() -> None:
        logger.warning("Dropping gateway tables")
        await DatabaseManager._run_metadata("drop_all")
        logger.info("Database tables dropped")

    @staticmethod
    async def health_check() -> bool:
        """Run a trivial query; False when the database is unreachable."""
        try:
            async with get_async_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False
