"""Pytest fixtures for API testing."""

import pytest
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chatdesk.api import deps, websocket
from chatdesk.api.v1 import accounts, conversations, messages
from chatdesk.config import Settings
from chatdesk.container import build_container


def _build_app() -> FastAPI:
    # Test app without lifespan; the container is injected by the fixture
    test_app = FastAPI(title="Chatdesk Test")
    test_app.include_router(accounts.router)
    test_app.include_router(conversations.router)
    test_app.include_router(messages.router)
    test_app.include_router(websocket.router)

    @test_app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": "1.0.0"}

    return test_app


@pytest.fixture
def container(tmp_path):
    """Service container on a fresh database."""
    test_settings = Settings(
        _env_file=None,
        database_path=str(tmp_path / "api.db"),
        log_level="WARNING",
        log_file=None
    )
    services = build_container(test_settings)
    deps.container = services
    yield services
    deps.container = None
    services.shutdown()


@pytest.fixture
async def client(container):
    """Create async HTTP client against the test app."""
    transport = ASGITransport(app=_build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sync_client(container):
    """Synchronous client, needed for WebSocket tests."""
    with TestClient(_build_app()) as tc:
        yield tc
