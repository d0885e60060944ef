"""Async SQLAlchemy engine and session management for the order store."""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import Settings, settings
from src.domains.fraud.config import FraudConfig, default_config

logger = structlog.get_logger()


def pool_size_for(app_settings: Settings, config: FraudConfig) -> int:
    """Connections needed so every concurrent statistics assessment can hold one session.

    Stores open one session per lookup and evaluators run sequentially within
    an order, so a statistics run holds at most ``max_concurrency`` sessions.
    """
    return max(app_settings.database_pool_size, config.statistics.max_concurrency)


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=pool_size_for(settings, default_config),
    max_overflow=settings.database_max_overflow,
)

async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for writes such as fraud reviews."""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create the order store and review tables if they are missing."""
    from src.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized", pool_size=engine.pool.size())


async def close_db() -> None:
    await engine.dispose()
    logger.info("database_closed")


async def check_db() -> bool:
    """Readiness probe: can the order store be reached."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.warning("database_check_failed")
        return False
