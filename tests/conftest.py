"""
Shared pytest fixtures for the Mapbox gateway tests.

Provides a scripted fake of the Mapbox HTTP API (served through
``httpx.MockTransport``, so no network is needed) and a factory for gateways
wired to it with a zero-delay retry policy.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest
import pytest_asyncio

from mapbox_gateway.integrations.maps import RequestGateway, RetryPolicy

TEST_TOKEN = "pk.test-token-123"

# httpx.Response, an Exception instance, or a (sync or async) callable
Outcome = Any


# ---------------------------------------------------------------------------
# Fake upstream
# ---------------------------------------------------------------------------


class FakeMapbox:
    """Scripted stand-in for api.mapbox.com.

    Outcomes are registered per path prefix and consumed in order; the last
    outcome for a prefix is repeated once the queue runs dry.  An outcome is
    an ``httpx.Response``, an exception to raise (network failure), or a
    callable (sync or async) taking the request.

    Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: list[tuple[str, list[Outcome]]] = []

    def add(self, path_prefix: str, *outcomes: Outcome) -> None:
        self._routes.append((path_prefix, list(outcomes)))

    def requests_to(self, path_prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(path_prefix)]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for prefix, outcomes in self._routes:
            if request.url.path.startswith(prefix):
                outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
                break
        else:
            return httpx.Response(404, json={"message": "Not Found"})

        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            result = outcome(request)
            if hasattr(result, "__await__"):
                result = await result
            return result
        return outcome


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def access_token() -> str:
    return TEST_TOKEN


@pytest.fixture
def fake_mapbox() -> FakeMapbox:
    return FakeMapbox()


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Default retry counts with no waiting between attempts."""
    return RetryPolicy(base_delay=0.0, jitter=0.0)


@pytest_asyncio.fixture
async def make_gateway(fake_mapbox: FakeMapbox, fast_retry: RetryPolicy):
    """Factory building gateways that talk to ``fake_mapbox``."""
    clients: list[httpx.AsyncClient] = []

    def _make(**kwargs: Any) -> RequestGateway:
        client = httpx.AsyncClient(transport=httpx.MockTransport(fake_mapbox))
        clients.append(client)
        kwargs.setdefault("retry_policy", fast_retry)
        return RequestGateway(TEST_TOKEN, client=client, **kwargs)

    yield _make

    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def gateway(make_gateway) -> RequestGateway:
    return make_gateway()
