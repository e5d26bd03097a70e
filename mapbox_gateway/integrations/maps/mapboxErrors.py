"""
Error taxonomy for the Mapbox gateway.

Callers branch on the exception *type*; messages of the operation errors are
fixed strings so that upstream wording never leaks past the gateway.  The
upstream HTTP status (when there was one) is kept on ``status_code`` for
callers that need it, and full diagnostic detail goes to the logs.
"""

from __future__ import annotations


class MapboxError(Exception):
    """Base class for every error raised by the gateway."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(MapboxError):
    """Raised at construction when the gateway cannot be configured
    (missing access token, unknown routing profile)."""


class ValidationError(MapboxError):
    """Raised before any network call when caller input is malformed."""


class MalformedResponseError(MapboxError):
    """Raised internally when a provider payload lacks the expected shape."""


class UpstreamError(MapboxError):
    """Base for the operation-specific errors raised after the transport
    gave up (retries exhausted or a non-retryable failure)."""

    default_message = "Mapbox request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or self.default_message, status_code=status_code)


class RouteOptimizationError(UpstreamError):
    default_message = "Failed to optimize route"


class ElevationLookupError(UpstreamError):
    default_message = "Failed to fetch elevation"


class GeocodingError(UpstreamError):
    default_message = "Failed to geocode locations"


class DistanceMatrixError(UpstreamError):
    default_message = "Failed to fetch distance matrix"
