"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, env_str, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .jellyfin import JellyfinConfig, get_jellyfin_config
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config
from .topten import TopTenConfig, get_topten_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "JellyfinConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "TopTenConfig",
    "configure_logging",
    "env_int",
    "env_str",
    "get_jellyfin_config",
    "get_storage_config",
    "get_topten_config",
    "require_env_var",
    "require_env_vars",
]
