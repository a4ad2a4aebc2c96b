"""
Async database session management.
Challenge: Connection pooling, bounded waits, proper cleanup.
Design: Dependency injection for request-scoped sessions; one transaction per
request, committed on success and rolled back on any error.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from krishisetu.config import Settings, get_settings

settings = get_settings()


def build_engine(settings: Settings) -> AsyncEngine:
    """Async engine with connection pool; every store call has a bounded wait."""
    url = settings.sqlalchemy_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.debug)
    connect_args = {}
    if url.startswith("postgresql+asyncpg"):
        connect_args = {
            "timeout": settings.db_command_timeout_seconds,
            "command_timeout": settings.db_command_timeout_seconds,
        }
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,  # Verify connections before use
        pool_size=10,
        max_overflow=20,
        pool_timeout=settings.db_pool_timeout_seconds,
        connect_args=connect_args,
    )


engine = build_engine(settings)

# Session factory: one session per request
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session per request. Ensures rollback on error, close on exit."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Type alias for FastAPI dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
