"""
Uphaar Backend: Database Engine & Sessions
==========================================

What:  Async SQLAlchemy engine and session factory for the SQL Record Store.
How:   Built explicitly by build_context() from Settings; nothing is created at
       import time, so the in-memory store never opens a connection.
Who:   context.build_record_store() and the Alembic environment.

Connection Pooling (PostgreSQL):
    pool_size / max_overflow:  from settings (defaults 20 + 10)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
SQLite (tests) uses SQLAlchemy's default pool and takes none of these options.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from uphaar.config import Settings


class Base(DeclarativeBase):
    """Shared metadata for ORM models; Alembic autogenerate reads it."""


def build_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.log_level == "DEBUG")

    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=settings.log_level == "DEBUG",
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
