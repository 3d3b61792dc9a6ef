import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


def create_engine_for_url(database_url: str) -> AsyncEngine:
    """Build an async engine. Postgres (Supabase) gets a pooled, READ COMMITTED engine;
    SQLite (tests, local runs via aiosqlite) uses the driver defaults."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before using
        isolation_level="READ COMMITTED",
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db_transaction(session_factory: async_sessionmaker[AsyncSession]):
    """Provide transactional scope for atomic operations"""
    async with session_factory() as session:
        async with session.begin():
            yield session


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables on SQLite. Postgres tables are created via migrations
    (`alembic upgrade head` from backend/)."""
    # Import all models to ensure they are registered with SQLModel
    import database.models  # noqa: F401

    if engine.dialect.name != "sqlite":
        logger.info("Schema for %s is managed by alembic migrations", engine.url.get_backend_name())
        return

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
