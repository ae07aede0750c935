"""Engine and session helpers for code running outside the Litestar app."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from pulse.config import DATABASE_URL
from pulse.models import Base


def make_engine(url: str = DATABASE_URL, echo: bool = False) -> AsyncEngine:
    return create_async_engine(url, echo=echo)


def make_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
