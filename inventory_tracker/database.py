"""Database configuration and session management."""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from inventory_tracker.config import settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def get_async_database_url(url: str) -> str:
    """Convert a standard database URL to its async driver form.

    sqlite://...      -> sqlite+aiosqlite://...
    postgresql://...  -> postgresql+asyncpg://...
    """
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given (sync or async) database URL."""
    return create_async_engine(get_async_database_url(url), echo=echo)


# Create async engine
async_engine = create_engine(settings.database_url, echo=settings.debug)

# Create async session factory
async_session_factory = async_sessionmaker(
    async_engine,
    expire_on_commit=False,
)


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet."""
    # Register models on Base.metadata
    import inventory_tracker.models  # noqa: F401

    engine = engine or async_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
