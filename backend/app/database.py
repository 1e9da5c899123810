"""
Database configuration and session management.
Uses SQLAlchemy async engine (asyncpg for PostgreSQL).
"""
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.config import get_settings
from app.models.base import Base

logger = logging.getLogger(__name__)


def _pool_options(database_url: str) -> dict:
    """Pool sizing only applies to server databases; SQLite uses its own pool."""
    if database_url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


# Create async engine
engine = create_async_engine(
    get_settings().database_url,
    echo=False,  # Disable SQLAlchemy query logging
    future=True,
    **_pool_options(get_settings().database_url),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    Dependency for FastAPI routes to get database session.
    Usage: db: AsyncSession = Depends(get_db)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """
    Initialize database: create tables.
    Called on application startup.
    """
    from app.models import User, Folder, FileRecord  # noqa: F401  (register tables)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def ping_db(db: AsyncSession) -> None:
    """Round-trip a trivial query. Raises on connection failure."""
    await db.execute(text("SELECT 1"))
