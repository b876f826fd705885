"""Translate gateway payloads into domain claims and media results."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from enricher.domain.model import (
    Claim,
    LogisticsAuthoritySource,
    MediaCheck,
    MediaValidationResult,
    SourceType,
    build_source,
    normalize_domain,
)
from enricher.domain.pipeline.errors import MalformedResponseError
from enricher.domain.ports import ResearchResult

if TYPE_CHECKING:
    from datetime import datetime

    from enricher.domain.model import ClaimSource

    from .schema import ClaimPayload, LogisticsResponse, MediaResponse, ResearchResponse

log = getLogger(__name__)

# Sources a remote collaborator may legitimately claim to be.
RESEARCH_SOURCE_TYPES = frozenset(
    {SourceType.OFFICIAL, SourceType.CURATED_RETAILER, SourceType.GENERIC_AGENT}
)


def parse_claim(
    payload: ClaimPayload,
    *,
    collaborator: str,
    extracted_at: datetime | None = None,
) -> Claim:
    try:
        source_type = SourceType(payload.source_type)
    except ValueError:
        raise MalformedResponseError(
            collaborator, f"unknown source type {payload.source_type!r}"
        ) from None
    if source_type not in RESEARCH_SOURCE_TYPES:
        raise MalformedResponseError(
            collaborator, f"source type {source_type.value!r} cannot come from {collaborator}"
        )
    if not normalize_domain(payload.domain):
        raise MalformedResponseError(collaborator, f"claim for {payload.field!r} has no domain")

    source = build_source(source_type, payload.domain)
    return _claim(payload, source=source, extracted_at=extracted_at)


def parse_research(
    response: ResearchResponse,
    *,
    collaborator: str = "research",
    extracted_at: datetime | None = None,
) -> ResearchResult:
    """Translate a research response, dropping the claims that cannot be trusted.

    A claim with an unknown or privileged source type, or without a domain,
    is skipped on its own; the rest of the response is kept.
    """

    claims: list[Claim] = []
    for payload in response.claims:
        try:
            claims.append(
                parse_claim(payload, collaborator=collaborator, extracted_at=extracted_at)
            )
        except MalformedResponseError as exc:
            log.warning("Skipping claim for %r: %s", payload.field, exc)
    domains = {normalize_domain(domain) for domain in response.source_domains}
    domains.update(claim.source_domain for claim in claims)
    domains.discard("")
    log.debug("%s returned %d claims from %d domains", collaborator, len(claims), len(domains))
    return ResearchResult(
        summary=response.summary.strip(),
        candidate_claims=tuple(claims),
        source_domains=tuple(sorted(domains)),
    )


def parse_logistics(
    response: LogisticsResponse,
    *,
    collaborator: str = "logistics",
    extracted_at: datetime | None = None,
) -> Claim | None:
    """The logistics lookup always speaks with its own authority, whatever it reports."""

    if not response.found or response.claim is None:
        return None
    payload = response.claim
    if payload.source_type not in {SourceType.LOGISTICS_AUTHORITY.value, ""}:
        log.debug(
            "%s reported source type %r; recording as logistics authority",
            collaborator,
            payload.source_type,
        )
    domain = normalize_domain(payload.domain)
    if not domain:
        raise MalformedResponseError(collaborator, "logistics claim has no domain")
    source = LogisticsAuthoritySource(domain=domain)
    return _claim(payload, source=source, extracted_at=extracted_at)


def parse_media(response: MediaResponse) -> MediaValidationResult:
    checks = tuple(
        MediaCheck(
            name=check.name,
            passed=check.passed,
            confidence=check.confidence,
            details=check.details,
        )
        for check in response.checks
    )
    reasons = tuple(response.reasons)
    if not response.passed and not reasons:
        reasons = tuple(f"{check.name} failed" for check in checks if not check.passed)
    return MediaValidationResult(
        image_url=response.image_url,
        checks=checks,
        passed=response.passed,
        reasons=reasons,
    )


def _claim(
    payload: ClaimPayload,
    *,
    source: ClaimSource,
    extracted_at: datetime | None,
) -> Claim:
    claim = Claim(
        field=payload.field,
        value=payload.value,
        source=source,
        confidence=payload.confidence,
        extraction_method=payload.method,
    )
    return claim if extracted_at is None else replace(claim, extracted_at=extracted_at)
