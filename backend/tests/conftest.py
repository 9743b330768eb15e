# tests/conftest.py
"""Shared fixtures: real models on an in-memory SQLite database, plus an HTTP client."""

import os

# Must be set before leadgen_admin.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import httpx
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from leadgen_admin.database import Base, get_db
from leadgen_admin.main import app
from leadgen_admin.models import Integration, Lead

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
async def engine():
    """Fresh schema per test."""
    options = {}
    if TEST_DATABASE_URL.startswith("sqlite"):
        options = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    
    engine = create_async_engine(TEST_DATABASE_URL, **options)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """Session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app, one session per request like production."""
    async def override_get_db():
        async with session_factory() as session:
            yield session
    
    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api") as c:
        yield c
    
    app.dependency_overrides.clear()


@pytest.fixture
def seed(session_factory):
    """Insert rows through a short-lived session and return them."""
    async def _seed(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows
    return _seed


@pytest.fixture
def make_integration():
    """Factory for unsaved Integration rows with unconfigured defaults."""
    def _make(**overrides) -> Integration:
        data = {
            "name": "Apollo",
            "type": "leadSource",
            "is_enabled": False,
            "is_configured": False,
            "credentials": {},
            "status": "unconfigured",
        }
        data.update(overrides)
        return Integration(**data)
    return _make


@pytest.fixture
def make_lead():
    """Factory for unsaved Lead rows."""
    def _make(**overrides) -> Lead:
        data = {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "title": "CTO",
            "email": "ada@analytical.io",
            "company_name": "Analytical Engines",
            "company_industry": "Software",
            "source": "Apollo",
            "status": "new",
            "score": 80,
            "tags": [],
        }
        data.update(overrides)
        return Lead(**data)
    return _make


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests")
    config.addinivalue_line("markers", "integration: tests that go through the HTTP API")
