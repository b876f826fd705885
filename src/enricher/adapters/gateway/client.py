"""HTTP clients for the research gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from enricher.adapters.http_resilience import ResilientClient
from enricher.config.http_resilience import CacheConfig, RateLimit, ResilienceConfig
from enricher.domain.pipeline.errors import CollaboratorUnavailableError, MalformedResponseError

from .schema import LogisticsResponse, MediaResponse, ResearchResponse
from .translator import parse_logistics, parse_media, parse_research

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from enricher.domain.model import Claim, MediaValidationResult
    from enricher.domain.ports import (
        LogisticsProvider,
        MediaValidator,
        ResearchProvider,
        ResearchResult,
    )

log = getLogger(__name__)

RESEARCH_PATH = "/research"
LOGISTICS_PATH = "/logistics"
MEDIA_PATH = "/media/validate"


def _default_resilience_config(name: str) -> Callable[[], ResilienceConfig]:
    def build() -> ResilienceConfig:
        return ResilienceConfig(
            name=name,
            ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
            cache=CacheConfig(backend="memory"),
        )

    return build


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class _GatewayEndpoint:
    """Shared request plumbing; one lazily created client per adapter."""

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    @property
    def collaborator(self) -> str:
        return self.resilience.name

    async def aclose(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        return self._client

    async def _fetch[M: BaseModel](
        self, path: str, params: Mapping[str, str], model: type[M]
    ) -> M:
        response = await self._get(path, params)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise CollaboratorUnavailableError(self.collaborator, f"HTTP 404 from {path}")
        return self._decode(response, model)

    async def _fetch_optional[M: BaseModel](
        self, path: str, params: Mapping[str, str], model: type[M]
    ) -> M | None:
        """Like :meth:`_fetch`, but a 404 means there is nothing to report."""

        response = await self._get(path, params)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        return self._decode(response, model)

    async def _get(self, path: str, params: Mapping[str, str]) -> httpx.Response:
        client = self._ensure_client()
        try:
            response = await client.get(path, params=httpx.QueryParams(params))
        except httpx.HTTPError as exc:
            raise CollaboratorUnavailableError(
                self.collaborator, f"{type(exc).__name__}: {exc}"
            ) from exc

        if response.is_error and response.status_code != httpx.codes.NOT_FOUND:
            raise CollaboratorUnavailableError(
                self.collaborator, f"HTTP {response.status_code} from {path}"
            )
        return response

    def _decode[M: BaseModel](self, response: httpx.Response, model: type[M]) -> M:
        try:
            payload = response.json()
        except ValueError:
            raise MalformedResponseError(self.collaborator, "response is not JSON") from None
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            log.debug("Rejected %s payload: %s", self.collaborator, exc)
            raise MalformedResponseError(
                self.collaborator, f"{exc.error_count()} schema errors in {model.__name__}"
            ) from exc


@dataclass(slots=True)
class GatewayResearchProvider(_GatewayEndpoint):
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config("research"))

    async def query(self, text: str) -> ResearchResult:
        response = await self._fetch(RESEARCH_PATH, {"q": text}, ResearchResponse)
        return parse_research(response, collaborator=self.collaborator)


@dataclass(slots=True)
class GatewayLogisticsProvider(_GatewayEndpoint):
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config("logistics"))

    async def lookup(self, model: str, brand: str) -> Claim | None:
        response = await self._fetch_optional(
            LOGISTICS_PATH, {"model": model, "brand": brand}, LogisticsResponse
        )
        if response is None:
            log.info("Logistics lookup found nothing for %s %s", brand, model)
            return None
        return parse_logistics(response, collaborator=self.collaborator)


@dataclass(slots=True)
class GatewayMediaValidator(_GatewayEndpoint):
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config("media"))

    async def validate(self, image_url: str, expected_model: str) -> MediaValidationResult:
        response = await self._fetch(
            MEDIA_PATH, {"image_url": image_url, "model": expected_model}, MediaResponse
        )
        return parse_media(response)


if TYPE_CHECKING:
    _research_check: ResearchProvider = GatewayResearchProvider()
    _logistics_check: LogisticsProvider = GatewayLogisticsProvider()
    _media_check: MediaValidator = GatewayMediaValidator()
