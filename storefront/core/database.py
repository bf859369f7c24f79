"""
Database configuration and session management
Uses SQLAlchemy with async support
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from sqlalchemy.exc import OperationalError, InterfaceError
from typing import AsyncGenerator
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)
import logging

from .config import settings

logger = logging.getLogger(__name__)

# Determine if we're using SQLite
is_sqlite = settings.database_url_async.startswith("sqlite")

# Create async engine with conditional parameters
if is_sqlite:
    # SQLite doesn't support connection pooling parameters
    engine = create_async_engine(
        settings.database_url_async,
        echo=settings.DATABASE_ECHO,
        poolclass=NullPool,
    )
else:
    engine = create_async_engine(
        settings.database_url_async,
        echo=settings.DATABASE_ECHO,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,  # Verify connections before use
    )

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Database dependency
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield database session
    Ensures proper cleanup after use
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

async def wait_for_db(attempts: int = None) -> None:
    """Block until the database accepts connections, backing off between attempts"""
    retrying = AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(attempts or settings.DATABASE_CONNECT_RETRIES),
        wait=wait_exponential(multiplier=settings.DATABASE_CONNECT_BACKOFF, min=1, max=30),
        retry=retry_if_exception_type((OperationalError, InterfaceError, OSError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    async for attempt in retrying:
        with attempt:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
    logger.info("Database connection established")

async def init_db(create_tables: bool = None) -> None:
    """
    Wait for the database, then create any missing tables

    Schema creation is skipped in the test environment, where the suite
    builds and drops tables itself.
    """
    from storefront.models import Base

    if create_tables is None:
        create_tables = settings.ENVIRONMENT != "test"
    if not create_tables:
        logger.info("Skipping schema creation in %s environment", settings.ENVIRONMENT)
        return

    await wait_for_db()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")

async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
