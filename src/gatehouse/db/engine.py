"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access. Each service builds its own
engine from its own database URL; the pool is shared by all requests of
that process and is safe for concurrent use.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from gatehouse.config import Settings


def build_engine(database_url: str, settings: Settings) -> AsyncEngine:
    """Create a pooled engine. echo=True in debug to see SQL queries."""
    return create_async_engine(
        database_url,
        echo=settings.debug,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory — each store call gets its own short-lived session."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine, base: type[DeclarativeBase]) -> None:
    """Create all tables of one declarative base (idempotent)."""
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)
