"""Engine and session factory for the profile store."""

from typing import Any, AsyncGenerator

from sqlalchemy import func, select
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings
from infrastructure.database.models import ProfileModel


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``url``.

    SQLite connections are shared across the event loop's worker thread, and
    transaction-mode poolers (pgbouncer, Supavisor) need asyncpg's prepared
    statement cache turned off.
    """
    connect_args: dict[str, Any] = {}
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        connect_args["check_same_thread"] = False
    elif "pooler" in url or "pgbouncer" in url:
        connect_args["statement_cache_size"] = 0

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=backend != "sqlite",
        connect_args=connect_args,
    )


engine = build_engine(settings.async_database_url, echo=settings.debug)

profile_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for one request; closed when the request ends."""
    async with profile_session_factory() as session:
        yield session


async def count_profiles(session: AsyncSession) -> int:
    """Number of stored profiles; raises if the profiles table is unreachable."""
    result = await session.execute(select(func.count()).select_from(ProfileModel))
    return int(result.scalar_one())
