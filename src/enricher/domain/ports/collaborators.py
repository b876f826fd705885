"""Ports for the external research, logistics and media collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from enricher.domain.model import Claim, MediaValidationResult


@dataclass(frozen=True, slots=True, kw_only=True)
class ResearchResult:
    """Claims a research collaborator gathered for one query."""

    summary: str = ""
    candidate_claims: tuple[Claim, ...] = ()
    source_domains: tuple[str, ...] = ()


@runtime_checkable
class ResearchProvider(Protocol):
    """General web research that produces candidate claims."""

    async def query(self, text: str) -> ResearchResult: ...


@runtime_checkable
class LogisticsProvider(Protocol):
    """Authoritative regional logistics lookup; ``None`` means not found."""

    async def lookup(self, model: str, brand: str) -> Claim | None: ...


@runtime_checkable
class MediaValidator(Protocol):
    """Validates that an image shows the expected product."""

    async def validate(self, image_url: str, expected_model: str) -> MediaValidationResult: ...


__all__ = ["LogisticsProvider", "MediaValidator", "ResearchProvider", "ResearchResult"]
