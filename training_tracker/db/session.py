"""Async database engine and session factory."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from training_tracker.core.config import get_settings

settings = get_settings()

# SQLite (tests, local runs) uses the driver's default pool
_pool_kwargs = (
    {}
    if settings.is_sqlite
    else {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
    }
)

engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    **_pool_kwargs,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async DB session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
