"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session. The whole directory is skipped
when PostgreSQL is unreachable.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import DBAPIError

from src.dt_common.database import create_tables
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    try:
        await create_tables()
    except (OSError, DBAPIError) as exc:
        pytest.skip(f"PostgreSQL not available: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client: AsyncClient) -> dict[str, str]:
    """Create a fresh user and return Bearer headers for it."""
    uid = uuid.uuid4().hex[:8]
    email = f"debtor_{uid}@example.com"
    await client.post("/api/v1/auth/register", json={
        "name": f"Debtor {uid}",
        "email": email,
        "password": "TestPass123!",
    })
    login_resp = await client.post("/api/v1/auth/login", json={
        "email": email,
        "password": "TestPass123!",
    })
    token = login_resp.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(loop_scope="session")
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Bearer headers for a brand-new user, so each test starts with no debts."""
    return await register_and_login(client)


@pytest_asyncio.fixture(loop_scope="session")
async def intruder_headers(client: AsyncClient) -> dict[str, str]:
    """A second user, for ownership checks."""
    return await register_and_login(client)
