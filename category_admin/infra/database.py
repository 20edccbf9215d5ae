"""Async database engine and session management.

Provides:
- Lazily created async SQLAlchemy engine and session factory
- Transactional session context manager (commit on success, rollback on error)
- Schema creation for local development
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from category_admin.config import settings
from category_admin.infra.logging import get_logger

logger = get_logger(__name__)

# Global engine (initialized on first use)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine

    if _engine is None:
        url = settings.database_url
        options: dict = {"echo": settings.debug}

        # SQLite drivers use a static pool without size limits
        if not url.startswith("sqlite"):
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_pool_max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
            )

        logger.info(
            "Creating database engine",
            dialect=url.split(":", 1)[0],
            pool_size=options.get("pool_size"),
        )
        _engine = create_async_engine(url, **options)

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


@asynccontextmanager
async def get_db_session(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session wrapped in a single transaction.

    Everything done inside the block is committed together, or rolled back
    together if the block raises.

    Args:
        factory: Session factory to use, defaults to the global one

    Example:
        async with get_db_session() as session:
            session.add(category)
    """
    session = (factory or get_session_factory())()

    try:
        yield session
        await session.commit()

    except Exception as e:
        await session.rollback()
        logger.error("Database session error", error=str(e))
        raise

    finally:
        await session.close()


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create any missing tables for the ORM models."""
    from category_admin.models import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))


async def close_db_engine() -> None:
    """Close the database engine and all connections.

    Call this during application shutdown.
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database engine")
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def verify_db_connection() -> bool:
    """Verify database connectivity.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        async with get_db_session() as session:
            await session.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
    except Exception as e:
        logger.error("Database connection failed", error=str(e))
        return False
