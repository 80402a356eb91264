"""Database connection and session management."""

import logging
import os
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from controlgap.db.models import Base

logger = logging.getLogger(__name__)

_engine = None
_async_session_factory = None

DEFAULT_DB_PATH = "controlgap.db"


def get_database_url() -> str:
    """Database URL from ``CONTROLGAP_DB``.

    A bare value is a SQLite file path; ``postgres://`` and ``postgresql://``
    URLs are switched to the asyncpg driver.
    """
    db_value = os.environ.get("CONTROLGAP_DB", DEFAULT_DB_PATH)
    if "://" not in db_value:
        return f"sqlite+aiosqlite:///{db_value}"

    for prefix in ("postgresql://", "postgres://"):
        if db_value.startswith(prefix):
            return "postgresql+asyncpg://" + db_value[len(prefix):]
    return db_value


def engine_options(db_url: str) -> dict[str, Any]:
    """Engine keyword arguments for a database URL.

    Only an in-memory SQLite database shares one connection; a SQLite file
    gets a connection per session so concurrent requests keep separate
    transactions, waiting on the file lock instead of failing.
    """
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        busy_timeout = float(os.environ.get("CONTROLGAP_DB_BUSY_TIMEOUT", "30"))
        return {"connect_args": {"timeout": busy_timeout}}

    return {
        "pool_size": int(os.environ.get("CONTROLGAP_DB_POOL_SIZE", "5")),
        "max_overflow": int(os.environ.get("CONTROLGAP_DB_MAX_OVERFLOW", "10")),
        "pool_pre_ping": True,
    }


async def init_db(db_url: str | None = None) -> None:
    """Create the engine and session factory, then any missing tables.

    Managed deployments run the Alembic migrations; ``create_all`` only adds
    tables that do not exist yet.
    """
    global _engine, _async_session_factory

    db_url = db_url or get_database_url()
    logger.info("Connecting to database: %s", db_url.rsplit("@", 1)[-1])

    _engine = create_async_engine(db_url, echo=False, **engine_options(db_url))
    _async_session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine."""
    global _engine, _async_session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One unit of work: commit when the block succeeds, roll back otherwise.

    A multi-step batch such as gap detection is therefore applied entirely
    or not at all.
    """
    if _async_session_factory is None:
        await init_db()

    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: a session scoped to the request."""
    async with session_scope() as session:
        yield session


def get_engine():
    """Get the database engine (readiness check, CLI status)."""
    return _engine
