"""Pipeline, market policy and readiness settings from the environment."""

from __future__ import annotations

from dataclasses import fields

from enricher.domain.eligibility import (
    MarketPolicy,
    PolicyValidationError,
    ensure_valid_policy,
    get_policy,
)
from enricher.domain.pipeline import PipelineSettings
from enricher.domain.readiness import ReadinessConfig, ReadinessWeights

from .env import env_bool, env_float, env_int, optional_env
from .errors import ConfigurationError

MAX_CONCURRENT_ITEMS_ENV = "ENRICHER_MAX_CONCURRENT_ITEMS"
MAX_ATTEMPTS_ENV = "ENRICHER_MAX_ATTEMPTS"
CALL_TIMEOUT_ENV = "ENRICHER_CALL_TIMEOUT_SECONDS"
BACKOFF_BASE_ENV = "ENRICHER_BACKOFF_BASE_SECONDS"
BACKOFF_MAX_ENV = "ENRICHER_BACKOFF_MAX_SECONDS"
MAX_IMAGES_ENV = "ENRICHER_MAX_IMAGES"
MARKET_POLICY_ENV = "ENRICHER_MARKET_POLICY"
REQUIRE_MEDIA_ENV = "ENRICHER_REQUIRE_MEDIA"
READINESS_THRESHOLD_ENV = "ENRICHER_READINESS_THRESHOLD"
READINESS_WEIGHTS_ENV = "ENRICHER_READINESS_WEIGHTS"


def get_pipeline_settings() -> PipelineSettings:
    defaults = PipelineSettings()
    try:
        return PipelineSettings(
            max_concurrent_items=env_int(MAX_CONCURRENT_ITEMS_ENV, defaults.max_concurrent_items),
            max_attempts=env_int(MAX_ATTEMPTS_ENV, defaults.max_attempts),
            call_timeout_seconds=env_float(CALL_TIMEOUT_ENV, defaults.call_timeout_seconds),
            backoff_base_seconds=env_float(BACKOFF_BASE_ENV, defaults.backoff_base_seconds),
            backoff_max_seconds=env_float(BACKOFF_MAX_ENV, defaults.backoff_max_seconds),
            max_images=env_int(MAX_IMAGES_ENV, defaults.max_images),
        )
    except ValueError as exc:
        raise ConfigurationError(f"Invalid pipeline settings: {exc}") from exc


def get_market_policy() -> MarketPolicy:
    name = optional_env(MARKET_POLICY_ENV) or "standard"
    try:
        return ensure_valid_policy(get_policy(name))
    except PolicyValidationError as exc:
        raise ConfigurationError(f"Invalid value for {MARKET_POLICY_ENV}: {exc}") from exc


def parse_weights(raw: str) -> ReadinessWeights:
    """Parse ``name=value`` pairs, e.g. ``required_fields=0.5,data_quality=0.2``.

    Components that are not named keep their default weight; the result must
    still sum to 1.
    """

    known = {item.name for item in fields(ReadinessWeights)}
    values: dict[str, float] = {}
    for chunk in raw.split(","):
        if not chunk.strip():
            continue
        name, sep, value = chunk.partition("=")
        name = name.strip()
        if not sep or name not in known:
            raise ConfigurationError(f"Unknown readiness weight: {chunk.strip()!r}")
        try:
            values[name] = float(value)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid readiness weight: {chunk.strip()!r}") from exc
    try:
        return ReadinessWeights(**values)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def get_readiness_config() -> ReadinessConfig:
    defaults = ReadinessConfig()
    raw_weights = optional_env(READINESS_WEIGHTS_ENV)
    threshold = env_float(READINESS_THRESHOLD_ENV, defaults.threshold)
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"{READINESS_THRESHOLD_ENV} must be within [0, 1]")
    return ReadinessConfig(
        weights=parse_weights(raw_weights) if raw_weights else defaults.weights,
        threshold=threshold,
        require_media=env_bool(REQUIRE_MEDIA_ENV, defaults.require_media),
    )
