"""
Pydantic v2 schemas for the Maps API -- MBX-GW-002
===================================================

Request bodies for the route optimization, geocoding and distance matrix
endpoints.  Only the JSON shape is checked here; coordinate counts and
ranges are validated by the gateway so the HTTP surface and direct callers
see the same rules.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class OptimizedRouteRequest(BaseModel):
    """Request body for route optimization."""

    waypoints: list[list[float]] = Field(
        description="Ordered [longitude, latitude] pairs (at least 2)",
    )


class GeocodeRequest(BaseModel):
    """Request body for batch geocoding."""

    locations: list[str] = Field(
        description="Free-text locations, each resolved independently",
    )


class DistanceMatrixRequest(BaseModel):
    """Request body for the distance matrix."""

    points: list[list[float]] = Field(
        description="[longitude, latitude] pairs (at least 2)",
    )
