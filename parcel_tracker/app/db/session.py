"""
Database session configuration.

Builds the async SQLAlchemy engine from settings, the session factory handed
to request handlers, and the schema bootstrap used on application startup.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from parcel_tracker.app.core.config import settings

# aiosqlite and asyncpg both accept a connect timeout keyword
engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    connect_args={"timeout": settings.db_timeout},
    future=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create the parcel table if it does not exist yet."""
    # Registers the model on Base.metadata
    from parcel_tracker.app.models import parcel  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
