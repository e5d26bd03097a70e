"""
Maps REST API endpoints -- MBX-GW-002
======================================

Thin HTTP surface over ``RequestGateway``.

Endpoints:
  - POST /api/v1/maps/optimized-route   Optimize the order of waypoints
  - GET  /api/v1/maps/elevation         Terrain elevation at a point
  - POST /api/v1/maps/geocode           Batch forward geocoding
  - POST /api/v1/maps/distance-matrix   All-pairs distances and durations

Gateway ``ValidationError`` maps to 422 with its description; operation
errors map to 502 with their fixed message only.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from mapbox_gateway.api.deps import Gateway
from mapbox_gateway.api.schemas.maps import (
    DistanceMatrixRequest,
    GeocodeRequest,
    OptimizedRouteRequest,
)
from mapbox_gateway.integrations.maps import UpstreamError, ValidationError

router = APIRouter(prefix="/maps", tags=["Maps"])


def _unprocessable(exc: ValidationError) -> HTTPException:
    # literal 422: the Starlette constant name is deprecated
    return HTTPException(
        status_code=422,
        detail=exc.message,
    )


def _bad_gateway(exc: UpstreamError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=exc.message,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/optimized-route", summary="Optimize the visiting order of waypoints")
async def optimized_route_endpoint(
    body: OptimizedRouteRequest,
    gateway: Gateway,
) -> dict[str, Any]:
    """Return the provider's trips and waypoints, unmodified."""
    try:
        return await gateway.get_optimized_route(body.waypoints)
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    except UpstreamError as exc:
        raise _bad_gateway(exc) from exc


@router.get("/elevation", summary="Get terrain elevation at a point")
async def elevation_endpoint(
    gateway: Gateway,
    longitude: float = Query(description="Longitude in decimal degrees"),
    latitude: float = Query(description="Latitude in decimal degrees"),
) -> dict[str, Any]:
    """Elevation in meters; 0 when the provider has no contour data there."""
    try:
        elevation = await gateway.get_elevation(longitude, latitude)
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    except UpstreamError as exc:
        raise _bad_gateway(exc) from exc
    return {"longitude": longitude, "latitude": latitude, "elevation": elevation}


@router.post("/geocode", summary="Geocode a batch of locations")
async def geocode_endpoint(body: GeocodeRequest, gateway: Gateway) -> dict[str, Any]:
    """One result per input location, in order; ``null`` where nothing matched."""
    try:
        results = await gateway.batch_geocode(body.locations)
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    except UpstreamError as exc:
        raise _bad_gateway(exc) from exc
    return {"results": results}


@router.post("/distance-matrix", summary="Distance and duration matrix between points")
async def distance_matrix_endpoint(
    body: DistanceMatrixRequest,
    gateway: Gateway,
) -> dict[str, Any]:
    """Return the provider's distance and duration grids, unmodified."""
    try:
        return await gateway.get_distance_matrix(body.points)
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    except UpstreamError as exc:
        raise _bad_gateway(exc) from exc
