"""
Invoice Manager Backend — Test Configuration (conftest.py)
===========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for failure simulation
    ├── db_engine: In-memory SQLite engine with the invoices table created
    ├── db_session: AsyncSession bound to db_engine
    ├── fetch_invoices: Reads rows back through a separate connection
    ├── seed_invoice: Inserts an invoice directly (bypassing the handlers)
    ├── valid_form: A form submission that passes validation
    └── test_client: HTTPX AsyncClient wired to the app and db_session
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

import datetime
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db_session
from app.models.invoice import Invoice
from app.services.cache_service import path_cache


# ══════════════════════════════════════════════════════════════════════════
# Mocked Persistence
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        state = await service.delete_invoice(mock_db_session, "x1")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Persistence (in-memory SQLite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with the schema created from the ORM metadata.

    StaticPool keeps a single connection, so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def fetch_invoices(db_engine):
    """
    Returns an async callable that reads every invoice row as a dict.

    Reads go through a fresh connection, not the session under test, so
    they see exactly what was committed.
    """

    async def _fetch() -> List[Dict[str, Any]]:
        async with db_engine.connect() as conn:
            result = await conn.execute(select(Invoice.__table__).order_by(Invoice.date))
            return [dict(row) for row in result.mappings().all()]

    return _fetch


@pytest.fixture
def seed_invoice(db_engine):
    """
    Returns an async callable that inserts an invoice and returns its id.

    The id is generated unless `invoice_id` is given (e.g. "x1").
    """

    async def _seed(
        customer_id: str = "c1",
        amount: int = 1000,
        status: str = "pending",
        date: datetime.date = datetime.date(2024, 1, 15),
        invoice_id: Optional[str] = None,
    ) -> str:
        factory = async_sessionmaker(db_engine, expire_on_commit=False)
        async with factory() as session:
            invoice = Invoice(
                customer_id=customer_id,
                amount=amount,
                status=status,
                date=date,
            )
            if invoice_id is not None:
                invoice.id = invoice_id
            session.add(invoice)
            await session.commit()
            return invoice.id

    return _seed


# ══════════════════════════════════════════════════════════════════════════
# Form Data
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def customer_id() -> str:
    return "c1"


@pytest.fixture
def valid_form(customer_id) -> Dict[str, str]:
    return {"customerId": customer_id, "amount": "45.5", "status": "pending"}


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clear_path_cache():
    """The list view cache is process-wide; start and end every test empty."""
    path_cache.clear()
    yield
    path_cache.clear()


@pytest_asyncio.fixture
async def test_client(db_session):
    """
    Provides an async HTTP test client for endpoint testing.

    The request-scoped session dependency is overridden with db_session.
    Redirects are not followed, so tests can assert on the 303 itself.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app

    async def _override_session():
        yield db_session

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
