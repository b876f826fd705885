"""Research gateway configuration for the collaborator adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .env import env_float, optional_env, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from .storage import StorageConfig

GATEWAY_URL_ENV = "ENRICHER_GATEWAY_URL"
GATEWAY_TOKEN_ENV = "ENRICHER_GATEWAY_TOKEN"
GATEWAY_TIMEOUT_ENV = "ENRICHER_GATEWAY_TIMEOUT_SECONDS"
RESEARCH_TIMEOUT_SECONDS = 60.0
LOGISTICS_TIMEOUT_SECONDS = 15.0
MEDIA_TIMEOUT_SECONDS = 30.0
CACHE_TTL_SECONDS = 24 * 60 * 60.0


@dataclass(frozen=True)
class GatewayConfig:
    """One resilience profile per collaborator behind the research gateway."""

    base_url: str
    research: ResilienceConfig
    logistics: ResilienceConfig
    media: ResilienceConfig


def _cache(storage: StorageConfig | None) -> CacheConfig:
    if storage is None:
        return CacheConfig(backend="memory", default_ttl_seconds=CACHE_TTL_SECONDS)
    return CacheConfig(
        backend="sqlite",
        sqlite_path=str(storage.http_cache_path()),
        default_ttl_seconds=CACHE_TTL_SECONDS,
    )


def get_gateway_config(
    *,
    storage: StorageConfig | None = None,
    cache_enabled: bool = True,
) -> GatewayConfig:
    """Read the gateway URL and token from the environment.

    Responses are cached in the data directory's HTTP cache when ``storage``
    is given and in memory otherwise.
    """

    values = require_env_vars((GATEWAY_URL_ENV,))
    base_url = values[GATEWAY_URL_ENV].rstrip("/")
    token = optional_env(GATEWAY_TOKEN_ENV)
    headers = {"Authorization": f"Bearer {token}"} if token else None
    timeout_override = env_float(GATEWAY_TIMEOUT_ENV, 0.0) or None
    cache = _cache(storage) if cache_enabled else None

    def profile(name: str, timeout: float, ratelimit: RateLimit) -> ResilienceConfig:
        return ResilienceConfig(
            name=name,
            base_url=base_url,
            timeout_seconds=timeout_override or timeout,
            ratelimit=ratelimit,
            cache=cache,
            default_headers={"Accept": "application/json", **(headers or {})},
        )

    return GatewayConfig(
        base_url=base_url,
        research=profile("research", RESEARCH_TIMEOUT_SECONDS, RateLimit(2, 1.0)),
        logistics=profile("logistics", LOGISTICS_TIMEOUT_SECONDS, RateLimit(5, 1.0)),
        media=profile("media", MEDIA_TIMEOUT_SECONDS, RateLimit(4, 1.0)),
    )
