"""
Maps integration package -- MBX-GW-001
=======================================

Public API for the Mapbox request gateway, its retry policy and its error
taxonomy.

Typical usage::

    from mapbox_gateway.integrations.maps import RequestGateway, GeocodingError

    async with RequestGateway.from_settings() as gateway:
        route = await gateway.get_optimized_route([(2.35, 48.85), (2.29, 48.86)])
"""

from mapbox_gateway.integrations.maps.coordinates import (
    Coordinate,
    encode_coordinates,
    format_degrees,
    parse_coordinate,
    parse_coordinate_list,
)
from mapbox_gateway.integrations.maps.mapboxErrors import (
    ConfigurationError,
    DistanceMatrixError,
    ElevationLookupError,
    GeocodingError,
    MalformedResponseError,
    MapboxError,
    RouteOptimizationError,
    UpstreamError,
    ValidationError,
)
from mapbox_gateway.integrations.maps.requestGateway import (
    DEFAULT_ELEVATION,
    PROFILES,
    RequestGateway,
)
from mapbox_gateway.integrations.maps.retryPolicy import (
    RetryPolicy,
    is_retryable,
    request_with_retry,
)

__all__ = [
    # requestGateway
    "RequestGateway",
    "DEFAULT_ELEVATION",
    "PROFILES",
    # retryPolicy
    "RetryPolicy",
    "is_retryable",
    "request_with_retry",
    # coordinates
    "Coordinate",
    "encode_coordinates",
    "format_degrees",
    "parse_coordinate",
    "parse_coordinate_list",
    # mapboxErrors
    "MapboxError",
    "ConfigurationError",
    "ValidationError",
    "MalformedResponseError",
    "UpstreamError",
    "RouteOptimizationError",
    "ElevationLookupError",
    "GeocodingError",
    "DistanceMatrixError",
]
