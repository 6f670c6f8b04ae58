"""Async database engine and session factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import HaloCallSettings, settings


def create_engine(config: HaloCallSettings | None = None) -> AsyncEngine:
    """Build the engine for DATABASE_URL; raises ConfigurationError if unset."""
    config = config or settings
    return create_async_engine(config.async_database_url, echo=config.echo_sql)


def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def open_session(config: HaloCallSettings | None = None) -> AsyncIterator[AsyncSession]:
    """Acquire the store connection for one run and always release it."""
    engine = create_engine(config)
    try:
        async with session_factory(engine)() as session:
            yield session
    finally:
        await engine.dispose()
