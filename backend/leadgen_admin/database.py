"""Database connection and session management."""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from leadgen_admin.config import settings

# Convert postgresql:// to postgresql+asyncpg://
database_url = settings.DATABASE_URL.replace(
    "postgresql://", "postgresql+asyncpg://"
)

engine_options = {
    "echo": settings.LOG_LEVEL == "DEBUG",
    "pool_pre_ping": True,
}
if database_url.startswith("postgresql"):
    engine_options.update(pool_size=20, max_overflow=10)

# Create async engine
engine = create_async_engine(database_url, **engine_options)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

# Base class for models
Base = declarative_base()


async def get_db():
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models():
    """Create any missing tables."""
    # Register every model on the metadata before create_all
    from leadgen_admin import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
