# backend/app/db/session.py
"""
Async engine and session factory.

- PostgreSQL via asyncpg: pooled, pre-ping, recycled connections
- SQLite via aiosqlite: local development and tests, foreign keys enforced
  on every connection so ON DELETE CASCADE behaves as on PostgreSQL

DATABASE_ECHO stays off unless explicitly enabled; it prints SQL and bound
parameters, which include token hashes.
"""
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, StaticPool

from backend.app.core.config import settings


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    SQLite ignores FOREIGN KEY / ON DELETE CASCADE unless asked per connection.
    Account deletion relies on the cascade to drop tokens, notes and shares.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Engine for the given URL.

    SQLite file  -> NullPool (one connection per checkout)
    SQLite memory -> StaticPool (the database lives as long as its only connection)
    anything else -> AsyncAdaptedQueuePool(pool_size=5, max_overflow=10)
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        in_memory = url.database in (None, "", ":memory:")
        sqlite_engine = create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool if in_memory else NullPool,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(sqlite_engine)
        return sqlite_engine

    return create_async_engine(
        database_url,
        echo=echo,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        # Hosted databases drop idle connections
        pool_pre_ping=True,
        pool_recycle=300,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # expire_on_commit=False: services return ORM objects after committing
    # autoflush=False: writes happen at explicit flush/commit points only
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide engine and session factory, created at import time
# ─────────────────────────────────────────────────────────────────────────────
engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session (FastAPI dependency).

    Never commits on its own: every service method commits or rolls back
    its own unit of work. The session is closed when the request ends.
    """
    async with AsyncSessionLocal() as session:
        yield session
