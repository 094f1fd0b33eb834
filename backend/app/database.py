"""
Invoice Manager Backend — Database Session Management
=======================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (tests, local experiments) get SQLAlchemy's default pool
    for the driver; the sizing options above are rejected by it.
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    # Echo SQL queries in DEBUG mode for development visibility
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: mutation handlers commit their own statement,
# attributes stay readable afterwards without another round-trip
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models inherit from this class to register with the shared metadata
    (used by Alembic and by the test suite's create_all).
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Mutation handlers commit their own statement before signalling a
    redirect, so the rollback triggered by the redirect signal passing
    through here finds nothing left to discard.

    Example usage in a route:
        @router.get("/dashboard/invoices")
        async def list_invoices(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()


async def wait_for_database(attempts: Optional[int] = None, max_wait: float = 10.0) -> None:
    """
    What:  Blocks until the database answers SELECT 1.
    When:  Application startup, so a container started alongside Postgres
           does not serve requests before the database accepts connections.

    Retries connection errors with jittered exponential backoff
    (0.5s, 1s, 2s... capped at max_wait). The last error is re-raised
    once `attempts` (default: settings.db_connect_attempts) run out.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type((OperationalError, OSError)),
        stop=stop_after_attempt(attempts or settings.db_connect_attempts),
        wait=wait_exponential_jitter(initial=0.5, max=max_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
