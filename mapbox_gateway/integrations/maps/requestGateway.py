"""
Mapbox request gateway -- MBX-GW-001
=====================================

Async facade over four Mapbox Platform APIs:

  - Optimization API v1   -> ``get_optimized_route``
  - Tilequery (terrain)   -> ``get_elevation``
  - Geocoding API v5      -> ``batch_geocode``
  - Distances/Matrix API  -> ``get_distance_matrix``

Each method validates its input, issues GET requests through
``request_with_retry`` with the gateway's own ``RetryPolicy``, extracts the
payload and logs the outcome.  Upstream failures are logged with full detail
and re-raised as one operation-specific error with a fixed message.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Any, Final

import httpx

from mapbox_gateway.core.config import Settings, settings
from mapbox_gateway.integrations.maps.coordinates import (
    encode_coordinates,
    parse_coordinate,
    parse_coordinate_list,
)
from mapbox_gateway.integrations.maps.mapboxErrors import (
    ConfigurationError,
    DistanceMatrixError,
    ElevationLookupError,
    GeocodingError,
    MalformedResponseError,
    RouteOptimizationError,
    ValidationError,
)
from mapbox_gateway.integrations.maps.retryPolicy import (
    RetryPolicy,
    describe_failure,
    request_with_retry,
    status_of,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_BASE_URL: Final[str] = "https://api.mapbox.com"
_REQUEST_TIMEOUT_SECONDS: Final[float] = 10.0

PROFILES: Final[frozenset[str]] = frozenset(
    {"driving", "driving-traffic", "walking", "cycling"}
)

_GEOCODING_PATH: Final[str] = "/geocoding/v5/mapbox.places-permanent"
_TILEQUERY_PATH: Final[str] = "/v4/mapbox.mapbox-terrain-v2/tilequery/{coordinates}.json"

DEFAULT_ELEVATION: Final[float] = 0.0

# json() raises ValueError on an undecodable body
_UPSTREAM_FAILURES: Final[tuple[type[Exception], ...]] = (
    httpx.HTTPError,
    MalformedResponseError,
    ValueError,
)


# ---------------------------------------------------------------------------
# Response-shape helpers
# ---------------------------------------------------------------------------


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


def _require_ok(data: Any, keys: Sequence[str]) -> dict[str, Any]:
    """Check a routing-style payload: ``code`` (when present) is "Ok" and
    every key in ``keys`` exists."""
    payload = _require_mapping(data)
    code = payload.get("code", "Ok")
    if code != "Ok":
        raise MalformedResponseError(f"Provider returned code {code!r}")
    missing = [key for key in keys if key not in payload]
    if missing:
        raise MalformedResponseError(f"Response is missing {', '.join(missing)}")
    return dict(payload)


def _features_of(data: Any) -> list[dict[str, Any]]:
    features = _require_mapping(data).get("features")
    if not isinstance(features, list):
        raise MalformedResponseError("Response has no features list")
    return features


def _extract_elevation(data: Any) -> float | None:
    """Elevation of the first feature, or None when there are no features."""
    features = _features_of(data)
    if not features:
        return None
    feature = features[0]
    properties = feature.get("properties") if isinstance(feature, Mapping) else None
    if not isinstance(properties, Mapping):
        raise MalformedResponseError("Feature has no properties")
    elevation = properties.get("ele")
    if isinstance(elevation, bool) or not isinstance(elevation, Real):
        raise MalformedResponseError("Feature has no numeric 'ele' property")
    return elevation


def _parse_locations(locations: Any) -> list[str]:
    if (
        not isinstance(locations, Sequence)
        or isinstance(locations, (str, bytes))
        or len(locations) == 0
    ):
        raise ValidationError("Invalid locations. Non-empty array required.")
    for index, location in enumerate(locations):
        if not isinstance(location, str) or not location.strip():
            raise ValidationError(
                f"Invalid locations[{index}]: expected a non-empty string"
            )
    return list(locations)


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class RequestGateway:
    """Long-lived client for the Mapbox APIs.

    The gateway holds the access token, one ``httpx.AsyncClient`` shared by
    all of its calls and its own ``RetryPolicy``.  It keeps no per-call
    state, so calls may run concurrently on the same event loop.

    Args:
        access_token: Mapbox access token.  Required.
        base_url: Provider host, without a trailing slash.
        profile: Routing profile for route optimization and the distance
            matrix.
        retry_policy: Retry policy for every outbound call.  Defaults to
            ``RetryPolicy()`` (3 retries, exponential backoff).
        timeout: Per-request timeout in seconds.
        validate_coordinates: Reject longitudes outside [-180, 180] and
            latitudes outside [-90, 90] before calling the provider.
        client: Optional pre-built ``httpx.AsyncClient``.  The gateway does
            not close a client it did not create.

    Raises:
        ConfigurationError: If the token is missing or the profile unknown.
    """

    def __init__(
        self,
        access_token: str | None,
        *,
        base_url: str = _BASE_URL,
        profile: str = "driving",
        retry_policy: RetryPolicy | None = None,
        timeout: float = _REQUEST_TIMEOUT_SECONDS,
        validate_coordinates: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not access_token or not access_token.strip():
            logger.error("Mapbox access token not provided")
            raise ConfigurationError("Mapbox access token is required")
        if profile not in PROFILES:
            raise ConfigurationError(
                f"Unknown routing profile {profile!r}; "
                f"expected one of {', '.join(sorted(PROFILES))}"
            )

        self._access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self.validate_coordinates = validate_coordinates
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> RequestGateway:
        """Build a gateway from application settings."""
        config = config or settings
        return cls(
            config.mapbox_access_token,
            base_url=config.mapbox_base_url,
            profile=config.mapbox_profile,
            retry_policy=RetryPolicy.from_settings(config),
            timeout=config.mapbox_timeout_seconds,
            validate_coordinates=config.mapbox_validate_coordinates,
            client=client,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RequestGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # -- internals ----------------------------------------------------------

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        response = await request_with_retry(
            self._client,
            f"{self.base_url}{path}",
            policy=self.retry_policy,
            params={"access_token": self._access_token, **params},
            timeout=self.timeout,
        )
        return response.json()

    @staticmethod
    def _log_failure(
        operation: str,
        message: str,
        exc: BaseException,
        **summary: Any,
    ) -> None:
        logger.error(
            "%s: %s",
            message,
            describe_failure(exc),
            extra={"operation": operation, "status": status_of(exc), **summary},
        )

    # -- public API ---------------------------------------------------------

    async def get_optimized_route(self, waypoints: Sequence[Any]) -> dict[str, Any]:
        """Optimize the visiting order of ``waypoints``.

        Args:
            waypoints: At least two ``(longitude, latitude)`` pairs.

        Returns:
            The provider's response (``code``, ``trips``, ``waypoints``)
            unmodified.

        Raises:
            ValidationError: Fewer than two valid coordinates.
            RouteOptimizationError: The provider call failed.
        """
        coordinates = parse_coordinate_list(
            waypoints, label="waypoints", check_range=self.validate_coordinates
        )
        path = (
            f"/optimized-trips/v1/mapbox/{self.profile}/"
            f"{encode_coordinates(coordinates)}"
        )

        try:
            data = _require_ok(
                await self._get_json(path, {"geometries": "geojson"}),
                ("trips", "waypoints"),
            )
        except _UPSTREAM_FAILURES as exc:
            self._log_failure(
                "route_optimization",
                "Route optimization error",
                exc,
                waypoint_count=len(coordinates),
            )
            raise RouteOptimizationError(status_code=status_of(exc)) from exc

        logger.info(
            "Route optimized for %d waypoints",
            len(coordinates),
            extra={"operation": "route_optimization", "waypoint_count": len(coordinates)},
        )
        return data

    async def get_elevation(self, longitude: float, latitude: float) -> float:
        """Look up terrain elevation (meters) at a point.

        A point with no contour data is not an error: a warning is logged
        and ``DEFAULT_ELEVATION`` (0) is returned.

        Raises:
            ValidationError: Non-numeric (or, with validation on,
                out-of-range) coordinates.
            ElevationLookupError: The provider call failed.
        """
        point = parse_coordinate(
            longitude, latitude, check_range=self.validate_coordinates
        )
        coordinates = point.encode()
        path = _TILEQUERY_PATH.format(coordinates=coordinates)

        try:
            data = await self._get_json(path, {"layers": "contour", "limit": 1})
            elevation = _extract_elevation(data)
        except _UPSTREAM_FAILURES as exc:
            self._log_failure(
                "elevation",
                "Elevation fetch error",
                exc,
                coordinates=coordinates,
            )
            raise ElevationLookupError(status_code=status_of(exc)) from exc

        if elevation is None:
            logger.warning(
                "No elevation data for coordinates: %s",
                coordinates,
                extra={"operation": "elevation", "coordinates": coordinates},
            )
            return DEFAULT_ELEVATION

        logger.info(
            "Elevation fetched for coordinates: %s",
            coordinates,
            extra={"operation": "elevation", "coordinates": coordinates},
        )
        return elevation

    async def _geocode_one(self, location: str) -> dict[str, Any] | None:
        data = await self._get_json(_GEOCODING_PATH, {"q": location, "limit": 1})
        features = _features_of(data)
        return features[0] if features else None

    async def batch_geocode(self, locations: Sequence[str]) -> list[dict[str, Any] | None]:
        """Geocode every location concurrently.

        Returns one entry per input location, in input order: the best
        matching feature, or ``None`` when the provider found nothing.

        The batch is all-or-nothing: if any single lookup fails after its
        retries, no results are returned and ``GeocodingError`` is raised.

        Raises:
            ValidationError: ``locations`` is empty, a bare string, or holds
                a blank/non-string entry.
            GeocodingError: Any of the lookups failed.
        """
        queries = _parse_locations(locations)

        try:
            results = await asyncio.gather(
                *(self._geocode_one(query) for query in queries)
            )
        except _UPSTREAM_FAILURES as exc:
            self._log_failure(
                "geocoding",
                "Batch geocoding error",
                exc,
                location_count=len(queries),
            )
            raise GeocodingError(status_code=status_of(exc)) from exc

        matched = sum(1 for result in results if result is not None)
        logger.info(
            "Geocoded %d locations",
            len(results),
            extra={
                "operation": "geocoding",
                "location_count": len(results),
                "matched_count": matched,
            },
        )
        return list(results)

    async def get_distance_matrix(self, points: Sequence[Any]) -> dict[str, Any]:
        """Fetch the all-pairs distance/duration matrix for ``points``.

        Returns:
            The provider's response (``distances``, ``durations``,
            ``sources``, ``destinations``) unmodified.

        Raises:
            ValidationError: Fewer than two valid coordinates.
            DistanceMatrixError: The provider call failed.
        """
        coordinates = parse_coordinate_list(
            points, label="points", check_range=self.validate_coordinates
        )
        path = (
            f"/distances/v1/mapbox/{self.profile}/"
            f"{encode_coordinates(coordinates)}"
        )

        try:
            data = _require_ok(
                await self._get_json(path, {"annotations": "duration,distance"}),
                ("distances", "durations"),
            )
        except _UPSTREAM_FAILURES as exc:
            self._log_failure(
                "distance_matrix",
                "Distance matrix error",
                exc,
                point_count=len(coordinates),
            )
            raise DistanceMatrixError(status_code=status_of(exc)) from exc

        logger.info(
            "Distance matrix calculated for %d points",
            len(coordinates),
            extra={"operation": "distance_matrix", "point_count": len(coordinates)},
        )
        return data


__all__ = ["DEFAULT_ELEVATION", "PROFILES", "RequestGateway"]
