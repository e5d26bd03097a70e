"""
E2E test fixtures for the Mapbox gateway API.

Provides:
- An in-process FastAPI test app with the maps routes registered
- httpx AsyncClient wired via ASGI transport (no network needed)
- A mocked ``RequestGateway`` injected through the dependency override
"""

from __future__ import annotations

from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mapbox_gateway.integrations.maps import RequestGateway


def _create_test_app(gateway: RequestGateway):
    """Build a FastAPI app with the maps routes and the gateway dependency
    overridden."""
    from fastapi import FastAPI

    from mapbox_gateway.api.deps import get_gateway
    from mapbox_gateway.api.routes.maps import router as maps_router

    app = FastAPI(title="Mapbox Gateway Test")
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.include_router(maps_router, prefix="/api/v1")
    return app


@pytest.fixture
def mock_gateway() -> MagicMock:
    """``RequestGateway`` double; its async methods are ``AsyncMock``s."""
    return MagicMock(spec=RequestGateway)


@pytest_asyncio.fixture
async def client(mock_gateway: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient connected to the test app via ASGI transport."""
    app = _create_test_app(mock_gateway)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def live_client(gateway: RequestGateway) -> AsyncGenerator[AsyncClient, None]:
    """Test app backed by a real gateway talking to the scripted upstream."""
    app = _create_test_app(gateway)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
