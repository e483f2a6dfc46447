"""Async SQLAlchemy engine and the per-request session dependency."""
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import Settings, get_settings


def engine_options(settings: Settings) -> dict[str, Any]:
    """
    Pool options for the configured database.

    SQLite (used by the test suite) runs on a single-connection pool that
    doesn't accept sizing arguments.
    """
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


settings = get_settings()

engine = create_async_engine(settings.database_url, echo=False, **engine_options(settings))

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield the request's database session.

    Services only flush; the commit happens once here when the route returns.
    Any exception rolls back everything the request wrote, including a user
    row whose insert lost an email uniqueness race.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
