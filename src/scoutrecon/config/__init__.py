"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_float_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .tba import TBA_AUTH_HEADER, TBA_BASE_URL, TbaConfig, get_tba_config

__all__ = [
    "TBA_AUTH_HEADER",
    "TBA_BASE_URL",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "TbaConfig",
    "configure_logging",
    "get_database_config",
    "get_storage_config",
    "get_tba_config",
    "optional_float_env",
    "require_env_vars",
]
