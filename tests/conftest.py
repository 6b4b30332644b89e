"""
Test configuration and fixtures for Showdown Vote

Every test gets a fresh in-memory SQLite database (aiosqlite) with the
full schema created from the models, so tests never share state.

Usage:
    pytest tests/
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

import pytest
from typing import AsyncGenerator

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import showdown_vote.models  # noqa: F401
from showdown_vote.core.config import settings
from showdown_vote.db.base import Base
from showdown_vote.db.session import get_db
from showdown_vote.main import app

TEST_RELAY_KEY = "test-relay-key"


@pytest.fixture
async def db_engine():
    """
    Create an in-memory database engine with all tables.

    StaticPool keeps a single connection so the in-memory database survives
    across sessions for the duration of the test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create an async database session bound to the test database."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def relay_key(monkeypatch) -> str:
    """Configure the relay shared secret for the duration of a test."""
    monkeypatch.setattr(settings, "relay_key", TEST_RELAY_KEY)
    return TEST_RELAY_KEY


@pytest.fixture
def test_app(session_factory) -> FastAPI:
    """
    FastAPI app with the database dependency pointed at the test database.
    """
    async def get_test_db():
        """Test database dependency."""
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = get_test_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """
    Create HTTP test client for API testing.
    """
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


# Markers for different test types
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
