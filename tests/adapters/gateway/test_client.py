from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from enricher.adapters.gateway import (
    GatewayLogisticsProvider,
    GatewayMediaValidator,
    GatewayResearchProvider,
)
from enricher.domain.model import (
    CuratedRetailerSource,
    GenericAgentSource,
    LogisticsAuthoritySource,
    OfficialSource,
)
from enricher.domain.pipeline import CollaboratorUnavailableError, MalformedResponseError
from tests.support.gateway import make_client_factory, resilience

if TYPE_CHECKING:
    from collections.abc import Callable

    from enricher.adapters.http_resilience import ResilientClient
    from enricher.config.http_resilience import ResilienceConfig
    from enricher.domain.ports import ResearchResult


def _research(handler: Callable[[httpx.Request], httpx.Response]) -> GatewayResearchProvider:
    return GatewayResearchProvider(
        resilience=resilience("research"), client_factory=make_client_factory(handler)
    )


def test_research_query_translates_claims(research_payload: dict[str, object]) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=research_payload)

    provider = _research(handler)

    async def scenario() -> ResearchResult:
        try:
            return await provider.query("HP CF234A Toner Cartridge")
        finally:
            await provider.aclose()

    result = asyncio.run(scenario())

    assert seen[0].url.path == "/research"
    assert seen[0].url.params["q"] == "HP CF234A Toner Cartridge"
    assert result.summary == "HP 34A black toner"
    brand, device, page_yield = result.candidate_claims
    assert brand.field == "brand"
    assert brand.source == OfficialSource(domain="hp.com")
    assert brand.extraction_method == "spec_table"
    assert device.source == CuratedRetailerSource(domain="nix.ru")
    assert page_yield.value == "9200"
    assert page_yield.source == GenericAgentSource(domain="blog.example")
    assert result.source_domains == (
        "blog.example",
        "cartridge.ru",
        "hp.com",
        "nix.ru",
    )


@pytest.mark.parametrize("status", [429, 500, 503, 401])
def test_error_status_means_unavailable(status: int) -> None:
    provider = _research(lambda request: httpx.Response(status))

    with pytest.raises(CollaboratorUnavailableError, match=f"HTTP {status}"):
        asyncio.run(provider.query("HP CF234A"))


def test_transport_error_means_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = _research(handler)

    with pytest.raises(CollaboratorUnavailableError, match="ConnectError"):
        asyncio.run(provider.query("HP CF234A"))


def test_non_json_body_is_malformed() -> None:
    provider = _research(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(MalformedResponseError, match="not JSON"):
        asyncio.run(provider.query("HP CF234A"))


def test_schema_violation_is_malformed(research_payload: dict[str, object]) -> None:
    research_payload["claims"][0]["confidence"] = 1.5  # type: ignore[index]
    provider = _research(lambda request: httpx.Response(200, json=research_payload))

    with pytest.raises(MalformedResponseError, match="schema errors in ResearchResponse"):
        asyncio.run(provider.query("HP CF234A"))


@pytest.mark.parametrize("source_type", ["manual_override", "logistics_authority", "blogger"])
def test_untrusted_claim_is_dropped_alone(
    research_payload: dict[str, object], source_type: str
) -> None:
    research_payload["claims"][1]["source_type"] = source_type  # type: ignore[index]
    provider = _research(lambda request: httpx.Response(200, json=research_payload))

    result = asyncio.run(provider.query("HP CF234A"))

    assert [claim.field for claim in result.candidate_claims] == ["brand", "yield"]
    assert [type(claim.source) for claim in result.candidate_claims] == [
        OfficialSource,
        GenericAgentSource,
    ]


def test_logistics_lookup_is_retagged() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "found": True,
                "claim": {
                    "field": "packaging",
                    "value": "box 1 pcs, 0.35 kg",
                    "source_type": "curated_retailer",
                    "domain": "logistics.example",
                    "confidence": 0.9,
                },
            },
        )

    provider = GatewayLogisticsProvider(
        resilience=resilience("logistics"), client_factory=make_client_factory(handler)
    )

    claim = asyncio.run(provider.lookup("CF234A", "HP"))

    assert seen[0].url.path == "/logistics"
    assert dict(seen[0].url.params) == {"model": "CF234A", "brand": "HP"}
    assert claim is not None
    assert claim.source == LogisticsAuthoritySource(domain="logistics.example")
    assert claim.value == "box 1 pcs, 0.35 kg"


@pytest.mark.parametrize(
    "response",
    [httpx.Response(404), httpx.Response(200, json={"found": False})],
)
def test_logistics_not_found_is_none(response: httpx.Response) -> None:
    provider = GatewayLogisticsProvider(
        resilience=resilience("logistics"),
        client_factory=make_client_factory(lambda request: response),
    )

    assert asyncio.run(provider.lookup("CF234A", "HP")) is None


def test_logistics_found_without_claim_is_malformed() -> None:
    provider = GatewayLogisticsProvider(
        resilience=resilience("logistics"),
        client_factory=make_client_factory(
            lambda request: httpx.Response(200, json={"found": True})
        ),
    )

    with pytest.raises(MalformedResponseError):
        asyncio.run(provider.lookup("CF234A", "HP"))


def test_media_validation_fills_in_reasons() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "image_url": "https://img.example.com/cf234a.jpg",
                "passed": False,
                "checks": [
                    {"name": "white_background", "passed": True, "confidence": 0.9},
                    {"name": "watermark_free", "passed": False, "details": "stock logo"},
                ],
            },
        )

    validator = GatewayMediaValidator(
        resilience=resilience("media"), client_factory=make_client_factory(handler)
    )

    result = asyncio.run(validator.validate("https://img.example.com/cf234a.jpg", "CF234A"))

    assert seen[0].url.path == "/media/validate"
    assert seen[0].url.params["model"] == "CF234A"
    assert not result.passed
    assert result.reasons == ("watermark_free failed",)
    assert [check.name for check in result.checks] == ["white_background", "watermark_free"]
    assert result.checks[1].details == "stock logo"


def test_client_is_created_lazily_and_closed() -> None:
    created: list[ResilientClient] = []
    factory = make_client_factory(lambda request: httpx.Response(200, json={"found": False}))

    def counting_factory(config: ResilienceConfig) -> ResilientClient:
        client = factory(config)
        created.append(client)
        return client

    provider = GatewayLogisticsProvider(
        resilience=resilience("logistics"),
        client_factory=counting_factory,
    )

    async def scenario() -> None:
        await provider.lookup("CF234A", "HP")
        await provider.lookup("CF230A", "HP")
        await provider.aclose()
        await provider.aclose()

    asyncio.run(scenario())

    assert len(created) == 1
    assert provider.collaborator == "logistics"
