"""
Retry policy for outbound Mapbox calls.

Every gateway owns its own ``RetryPolicy`` and hands it to
``request_with_retry`` on each call, so two gateways in the same process never
share retry state or configuration.

Retried:
  - network-level failures (timeouts, connection/read/write errors, broken
    HTTP framing from the server);
  - HTTP 429 (rate limited);
  - HTTP 5xx.  All gateway operations are idempotent GETs.

Everything else (400, 401, 403, 404, 422, ...) fails on the first attempt.
After the last retry the final exception propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Final

import httpx

from mapbox_gateway.core.config import Settings
from mapbox_gateway.integrations.maps.mapboxErrors import ConfigurationError

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS: Final[tuple[type[Exception], ...]] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)

_TOO_MANY_REQUESTS: Final[int] = 429
_REQUEST_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait in between.

    Delay before retry ``n`` (1-based) is
    ``base_delay * multiplier ** (n - 1)``, capped at ``max_delay``, then
    spread by +/- ``jitter`` (a fraction of the delay).
    """

    max_retries: int = 3
    base_delay: float = 0.5
    max_delay: float = 8.0
    multiplier: float = 2.0
    jitter: float = 0.1

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("retry delays must be >= 0")
        if self.multiplier < 1:
            raise ConfigurationError("multiplier must be >= 1")
        if not 0 <= self.jitter < 1:
            raise ConfigurationError("jitter must be in [0, 1)")

    @classmethod
    def from_settings(cls, config: Settings) -> RetryPolicy:
        return cls(
            max_retries=config.mapbox_max_retries,
            base_delay=config.mapbox_retry_base_delay,
            max_delay=config.mapbox_retry_max_delay,
        )

    def compute_delay(self, retry: int) -> float:
        """Seconds to wait before the given retry (1-based)."""
        delay = min(self.base_delay * self.multiplier ** (retry - 1), self.max_delay)
        if self.jitter and delay > 0:
            spread = delay * self.jitter
            delay += random.uniform(-spread, spread)
        return max(0.0, delay)


def is_retryable_status(status_code: int) -> bool:
    return status_code == _TOO_MANY_REQUESTS or status_code >= 500


def is_retryable(exc: BaseException) -> bool:
    """Return True if ``exc`` is a failure worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        return is_retryable_status(exc.response.status_code)
    return isinstance(exc, RETRYABLE_EXCEPTIONS)


def status_of(exc: BaseException) -> int | None:
    """Upstream HTTP status carried by ``exc``, if any."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


def describe_failure(exc: BaseException) -> str:
    """Short description of a failure that is safe to log.

    ``httpx.HTTPStatusError`` messages embed the full request URL including
    the ``access_token`` query parameter, so only the status is reported.
    """
    status = status_of(exc)
    if status is not None:
        return f"HTTP {status}"
    return f"{type(exc).__name__}: {exc}"


async def request_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    policy: RetryPolicy,
    params: dict[str, Any] | None = None,
    timeout: float = _REQUEST_TIMEOUT_SECONDS,
) -> httpx.Response:
    """GET ``url`` and return the successful (2xx) response.

    ``timeout`` bounds each attempt separately, not the whole call.

    Raises:
        httpx.HTTPStatusError: Non-2xx response that is not retryable, or the
            last one once retries are exhausted.
        httpx.HTTPError: The last network-level failure once retries are
            exhausted, or any non-retryable transport failure.
    """
    retry = 0
    while True:
        try:
            response = await client.get(url, params=params, timeout=timeout)
            response.raise_for_status()
            return response
        except httpx.HTTPError as exc:
            if retry >= policy.max_retries or not is_retryable(exc):
                raise
            retry += 1
            delay = policy.compute_delay(retry)
            logger.warning(
                "Retry attempt %d for Mapbox API call",
                retry,
                extra={
                    "attempt": retry,
                    "max_retries": policy.max_retries,
                    "delay_seconds": round(delay, 3),
                    "status": status_of(exc),
                    "error": describe_failure(exc),
                },
            )
            if delay > 0:
                await asyncio.sleep(delay)


__all__ = [
    "RETRYABLE_EXCEPTIONS",
    "RetryPolicy",
    "describe_failure",
    "is_retryable",
    "is_retryable_status",
    "request_with_retry",
    "status_of",
]
