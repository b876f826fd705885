"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """HTTP profile of one collaborator.

    Retries are not configured here: the pipeline retries every collaborator
    call itself, so the client sends each request once.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None

    def with_overrides(
        self,
        *,
        base_url: str | None = None,
        cache: CacheConfig | None | Literal["keep"] = "keep",
        headers: Mapping[str, str] | None = None,
    ) -> ResilienceConfig:
        """Copy of this config with the given parts swapped; headers are merged."""

        merged = {**(self.default_headers or {}), **(headers or {})}
        return replace(
            self,
            base_url=base_url if base_url is not None else self.base_url,
            cache=self.cache if cache == "keep" else cache,
            default_headers=merged or None,
        )
