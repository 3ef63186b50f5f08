"""Settings for the resilient HTTP client used to reach official-results services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

CacheBackend = Literal["sqlite", "memory"]

RETRY_STATUSES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})
TRANSIENT_ERRORS: Final[tuple[type[httpx.HTTPError], ...]] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retries for idempotent reads; only ``GET`` requests are ever retried."""

    attempts: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    retry_statuses: frozenset[int] = RETRY_STATUSES
    retry_on: tuple[type[httpx.HTTPError], ...] = TRANSIENT_ERRORS


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: CacheBackend = "memory"
    # Only used by the sqlite backend; defaults to the data directory.
    path: Path | None = None
    ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None
