"""Configuration helpers and defaults."""

from __future__ import annotations

from .collaborators import GatewayConfig, get_gateway_config
from .env import env_bool, env_float, env_int, optional_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig
from .logging import configure_logging
from .pipeline import (
    get_market_policy,
    get_pipeline_settings,
    get_readiness_config,
    parse_weights,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "GatewayConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "StorageConfig",
    "configure_logging",
    "env_bool",
    "env_float",
    "env_int",
    "get_database_config",
    "get_gateway_config",
    "get_market_policy",
    "get_pipeline_settings",
    "get_readiness_config",
    "get_storage_config",
    "optional_env",
    "parse_weights",
    "require_env_vars",
]
