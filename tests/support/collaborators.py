"""In-memory collaborators for coordinator tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from enricher.domain.model import (
    Claim,
    LogisticsAuthoritySource,
    MediaCheck,
    MediaValidationResult,
    SourceType,
)
from enricher.domain.ports import ResearchResult
from tests.support.claims import device_claim, make_claim

E2E_TITLE = "HP CF234A LaserJet Pro M106w Toner Cartridge 9.2K pages"
IMAGE_URL = "https://img.example.com/cf234a.jpg"
FALLBACK_MARKER = "packaging weight dimensions"


def e2e_research_result() -> ResearchResult:
    """Two trusted retailers list the printer; a blog disagrees on the yield."""

    claims = (
        make_claim(
            "yield",
            "15000 pages",
            source_type=SourceType.GENERIC_AGENT,
            domain="random-spam-blog.com",
            confidence=0.95,
        ),
        device_claim("HP LaserJet Pro M106w", "cartridge.ru", confidence=0.9),
        device_claim("HP LaserJet Pro M106w", "nix.ru", confidence=0.85),
        make_claim(
            "image_url",
            IMAGE_URL,
            source_type=SourceType.GENERIC_AGENT,
            domain="img.example.com",
            confidence=0.7,
        ),
    )
    return ResearchResult(
        summary="HP 34A black toner for LaserJet Pro M106w",
        candidate_claims=claims,
        source_domains=("cartridge.ru", "nix.ru", "random-spam-blog.com"),
    )


def packaging_claim(value: str = "box 1 pcs, 0.35 kg, 35x10x12 cm") -> Claim:
    return Claim(
        field="packaging",
        value=value,
        source=LogisticsAuthoritySource(domain="logistics.example"),
        confidence=0.9,
        extraction_method="logistics_lookup",
    )


def passing_media(image_url: str = IMAGE_URL) -> MediaValidationResult:
    return MediaValidationResult(
        image_url=image_url,
        checks=(
            MediaCheck(name="white_background", passed=True, confidence=0.9),
            MediaCheck(name="model_visible", passed=True, confidence=0.85),
        ),
        passed=True,
    )


@dataclass
class FakeResearch:
    """Answers research queries; fallback queries get ``fallback``.

    ``errors`` are raised, in order, before any answer is given.
    """

    result: ResearchResult = field(default_factory=e2e_research_result)
    fallback: ResearchResult = field(default_factory=ResearchResult)
    errors: list[BaseException] = field(default_factory=list[BaseException])
    gate: asyncio.Event | None = None
    calls: list[str] = field(default_factory=list[str])

    async def query(self, text: str) -> ResearchResult:
        self.calls.append(text)
        if self.gate is not None:
            await self.gate.wait()
        if self.errors:
            raise self.errors.pop(0)
        if FALLBACK_MARKER in text:
            return self.fallback
        return self.result


@dataclass
class FakeLogistics:
    claim: Claim | None = field(default_factory=packaging_claim)
    errors: list[BaseException] = field(default_factory=list[BaseException])
    calls: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])

    async def lookup(self, model: str, brand: str) -> Claim | None:
        self.calls.append((model, brand))
        if self.errors:
            raise self.errors.pop(0)
        return self.claim


@dataclass
class FakeMedia:
    passed: bool = True
    errors: list[BaseException] = field(default_factory=list[BaseException])
    calls: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])

    async def validate(self, image_url: str, expected_model: str) -> MediaValidationResult:
        self.calls.append((image_url, expected_model))
        if self.errors:
            raise self.errors.pop(0)
        if self.passed:
            return passing_media(image_url)
        return MediaValidationResult(
            image_url=image_url,
            checks=(MediaCheck(name="watermark_free", passed=False, confidence=0.8),),
            passed=False,
            reasons=("watermark detected",),
        )


@dataclass
class RecordingSleep:
    delays: list[float] = field(default_factory=list[float])

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
