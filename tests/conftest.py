"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from backend.app.api.auth import InvalidTokenError, get_token_verifier
from backend.app.api.routes.schedules import get_route_planner
from backend.app.db.engine import get_session
from backend.app.db.models import Base
from backend.app.main import app

# Bearer token -> claims accepted by the fake verifier
TEST_TOKENS: dict[str, dict[str, Any]] = {
    "token-alice": {"sub": "auth0|alice", "email": "alice@illinois.edu", "name": "Alice"},
    "token-bob": {"sub": "auth0|bob", "email": "bob@illinois.edu", "name": "Bob"},
}


class FakeTokenVerifier:
    """Verifier accepting only TEST_TOKENS."""

    async def verify(self, token: str) -> dict[str, Any]:
        if token not in TEST_TOKENS:
            raise InvalidTokenError("unknown test token")
        return TEST_TOKENS[token]


@pytest_asyncio.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine on a throwaway SQLite file with all tables."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}",
        poolclass=NullPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for repository tests."""
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def api_client(test_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with DB, auth and routing overridden.

    Usage:
        async def test_something(api_client):
            response = await api_client.get("/api/histories")
    """

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with AsyncSession(test_engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_token_verifier] = FakeTokenVerifier
    app.dependency_overrides[get_route_planner] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
