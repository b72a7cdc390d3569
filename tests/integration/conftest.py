"""Integration test fixtures with an in-memory database."""

from collections.abc import AsyncGenerator
from datetime import date
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from paye_engine.api.app import create_app
from paye_engine.api.dependencies import get_db_session, get_today
from paye_engine.calculators.rules import default_rules, snapshot_to_payload
from paye_engine.database import create_schema

# One shared connection so every session sees the same in-memory database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_TODAY = date(2025, 2, 15)


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for service-level tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client against the in-memory database."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_today] = lambda: FIXED_TODAY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def rules_payload() -> dict[str, Any]:
    """Statutory schedule as a JSON request body."""
    payload = snapshot_to_payload(default_rules())
    del payload["is_active"]
    return payload


@pytest.fixture
def employee_payload() -> dict[str, Any]:
    return {
        "employee": {"employee_id": "EMP001", "basic_salary": "50000"},
        "allowances": {"housing": "10000", "transport": "5000"},
    }
