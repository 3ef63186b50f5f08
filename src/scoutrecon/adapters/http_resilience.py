"""Async HTTP client with retries, rate limiting and response caching."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from scoutrecon.config import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    get_storage_config,
)

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, URLTypes

__all__ = [
    "CacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
]

log = getLogger(__name__)


class GetOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    headers: HeaderTypes | None


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.attempts,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        allowed_methods=("GET",),
        status_forcelist=tuple(sorted(policy.retry_statuses)),
        retry_on_exceptions=policy.retry_on,
    )


def build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    """Return hishel storage for ``config``, or ``None`` when caching is off."""

    if config is None or not config.enabled:
        return None
    if config.backend == "memory":
        database_path = ":memory:"
    elif config.backend == "sqlite":
        database_path = str(config.path or get_storage_config().http_cache_path())
    else:
        raise ValueError(f"Unsupported cache backend: {config.backend}")
    return AsyncSqliteStorage(database_path=database_path, default_ttl=config.ttl_seconds)


class ResilientClient:
    """Read-only client: every request is a ``GET`` through retry, limiter and cache."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )

        client_kwargs: dict[str, object] = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=build_retry(config.retry)),
            "headers": dict(config.default_headers or {}),
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url

        storage = build_cache_storage(config.cache)
        if storage is not None:
            client_kwargs["storage"] = storage
        client_type = httpx.AsyncClient if storage is None else AsyncCacheClient
        self._client: httpx.AsyncClient = client_type(**client_kwargs)  # type: ignore[arg-type]
        log.debug(f"Built HTTP client {config.name} (cache={storage is not None})")

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: URLTypes, **kwargs: Unpack[GetOptions]) -> httpx.Response:
        if self._limiter is None:
            return await self._client.get(url, **kwargs)
        async with self._limiter:
            return await self._client.get(url, **kwargs)
