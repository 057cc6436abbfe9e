"""Database engine, session factory and request sessions.

Catalog documents (price configurations, attributes) live in JSON
columns, so one row carries the full document of an entity and a
single-row write is atomic without multi-statement transactions.
"""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog_service.infrastructure.config import settings

logger = structlog.get_logger()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
)

# Services commit explicitly and keep using the returned entities
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a request-scoped database session.

    Pending changes are committed when the request succeeds and rolled
    back when it raises.

    Yields:
        AsyncSession for database operations.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database(session: AsyncSession) -> bool:
    """Check that the database answers a trivial query.

    Args:
        session: Session to probe with.

    Returns:
        True if the database responded.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database check failed", error=str(e))
        return False
    return True
