"""Jellyfin server configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig
from .storage import get_storage_config

JELLYFIN_TIMEOUT_SECONDS = 30.0
JELLYFIN_CLIENT_NAME = "topten"
JELLYFIN_PAGE_SIZE = 500

_CACHE_BACKENDS = ("off", "memory", "sqlite")


@dataclass(frozen=True)
class JellyfinConfig:
    """Holds Jellyfin API configuration values."""

    base_url: str
    api_key: str
    resilience: ResilienceConfig
    page_size: int = JELLYFIN_PAGE_SIZE


def _cache_config_from_env() -> CacheConfig | None:
    backend = (os.getenv("TOPTEN_HTTP_CACHE") or "off").strip().lower()
    if backend not in _CACHE_BACKENDS:
        choices = ", ".join(_CACHE_BACKENDS)
        raise ConfigurationError(f"TOPTEN_HTTP_CACHE must be one of {choices}, got {backend!r}")
    if backend == "off":
        return None
    if backend == "sqlite":
        path = get_storage_config().http_cache_path()
        return CacheConfig(backend="sqlite", sqlite_path=str(path))
    return CacheConfig(backend="memory")


def get_jellyfin_config(*, resilience: ResilienceConfig | None = None) -> JellyfinConfig:
    values = require_env_vars(("JELLYFIN_URL", "JELLYFIN_API_KEY"))
    base_url = values["JELLYFIN_URL"].strip().rstrip("/")
    api_key = values["JELLYFIN_API_KEY"].strip()
    return JellyfinConfig(
        base_url=base_url,
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="jellyfin",
            base_url=base_url,
            timeout_seconds=JELLYFIN_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
            cache=_cache_config_from_env(),
            default_headers={
                "X-Emby-Token": api_key,
                "Accept": "application/json",
            },
        ),
    )
