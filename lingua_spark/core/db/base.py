from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from lingua_spark.core.config import settings
from lingua_spark.core.logging import get_logger


Base = declarative_base()


def _engine_kwargs() -> dict:
    kwargs: dict = {"echo": settings.database.echo}
    if settings.database.url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # A single shared connection keeps an in-memory database alive
        if settings.database.is_memory:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return kwargs


engine = create_async_engine(settings.database.url, **_engine_kwargs())

async_session_maker = async_sessionmaker(
    engine,
    expire_on_commit=False,
)


logger = get_logger(__name__)


async def init_models() -> None:
    """Create tables for every model registered on ``Base``."""
    from lingua_spark.core.db import schemas  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_models() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Session rolled back due to error: {e}")
            raise
