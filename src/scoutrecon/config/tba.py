"""The Blue Alliance (official match results) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

TBA_BASE_URL = "https://www.thebluealliance.com/api/v3"
TBA_AUTH_HEADER = "X-TBA-Auth-Key"
TBA_TIMEOUT_SECONDS = 15.0
TBA_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class TbaConfig:
    """Holds The Blue Alliance API configuration values."""

    api_key: str
    resilience: ResilienceConfig


def get_tba_config(*, resilience: ResilienceConfig | None = None) -> TbaConfig:
    values = require_env_vars(("TBA_API_KEY",))
    api_key = values["TBA_API_KEY"]
    return TbaConfig(
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="tba",
            base_url=TBA_BASE_URL,
            timeout_seconds=optional_float_env("TBA_TIMEOUT_SECONDS", TBA_TIMEOUT_SECONDS),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=CacheConfig(backend="sqlite", ttl_seconds=TBA_CACHE_TTL_SECONDS),
            default_headers={TBA_AUTH_HEADER: api_key},
        ),
    )
