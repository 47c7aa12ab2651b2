"""Fixtures for API tests."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api.main import app
from api.routes import game as game_routes
from api.session import InMemorySessionStore, set_session_store


@pytest.fixture(autouse=True)
def memory_store():
    """Use a fresh in-memory session store and an empty game cache."""
    store = InMemorySessionStore()
    set_session_store(store)
    game_routes._games.clear()
    yield store
    game_routes._games.clear()
    set_session_store(None)


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session_id(client):
    """Start a normal game and return its session token."""
    response = await client.post("/api/game/new", json={"difficulty": "normal"})
    return response.json()["session_id"]
