"""
Shared FastAPI dependencies for the Mapbox gateway API.

The application builds one ``RequestGateway`` at startup and keeps it on
``app.state``; route handlers receive it through the ``Gateway`` dependency.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from mapbox_gateway.integrations.maps import RequestGateway


def get_gateway(request: Request) -> RequestGateway:
    """Return the process-wide gateway, or 503 if startup did not create one."""
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Mapbox gateway is not configured",
        )
    return gateway


Gateway = Annotated[RequestGateway, Depends(get_gateway)]
