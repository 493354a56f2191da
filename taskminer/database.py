"""Database engine and session factory."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskminer.config.settings import settings
from taskminer.models.base import Base


def create_engine(
    database_url: str | None = None, echo: bool | None = None
) -> AsyncEngine:
    """Create the async engine for the configured database."""
    url = database_url or settings.database_url
    options = {}
    if url.startswith("postgresql"):
        options = {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
            "pool_recycle": 300,
        }
    return create_async_engine(
        url,
        echo=settings.database_echo if echo is None else echo,
        **options,
    )


def create_session_maker(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create a session maker bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create all tables (development and tests; production uses alembic)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
