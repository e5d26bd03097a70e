"""Mapbox Gateway API -- Main Application Entry Point

Creates the FastAPI application, builds the process-wide ``RequestGateway``
on startup and registers the maps routes under the /api/v1 prefix.

Run with::

    uvicorn mapbox_gateway.main:app --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mapbox_gateway.core.config import settings
from mapbox_gateway.core.logging import configure_logging
from mapbox_gateway.integrations.maps import RequestGateway

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: startup / shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Startup:
      - Configure structured logging.
      - Build the gateway from settings.  A missing access token raises
        ``ConfigurationError`` and aborts startup.

    Shutdown:
      - Close the gateway's HTTP client.
    """
    configure_logging(settings)
    app.state.gateway = RequestGateway.from_settings(settings)
    logger.info("Mapbox gateway started", extra={"profile": settings.mapbox_profile})

    yield

    await app.state.gateway.aclose()
    app.state.gateway = None


# ---------------------------------------------------------------------------
# Application instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health():
    """Lightweight health check for load balancers and readiness probes."""
    return {"status": "ok", "version": settings.app_version}


# ---------------------------------------------------------------------------
# Register API route modules
# ---------------------------------------------------------------------------

from mapbox_gateway.api.routes import maps  # noqa: E402

app.include_router(maps.router, prefix=settings.api_v1_prefix)
