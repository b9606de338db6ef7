"""Async engine and session construction for the record store."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from moolah.config import Settings


def get_engine(settings: Settings) -> AsyncEngine:
    """Return the engine for the configured ``DATABASE_URL``."""

    return create_engine_from_url(settings.database.url)


def create_engine_from_url(url: str) -> AsyncEngine:
    """Create an asynchronous SQLAlchemy engine for ``url``."""

    return create_async_engine(url, echo=False, future=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory whose objects stay usable after commit."""

    return async_sessionmaker(bind=engine, expire_on_commit=False)


__all__ = ["get_engine", "create_engine_from_url", "create_session_factory"]
