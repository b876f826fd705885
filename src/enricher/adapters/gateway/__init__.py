"""Public interface for the research gateway adapter."""

from __future__ import annotations

from .client import GatewayLogisticsProvider, GatewayMediaValidator, GatewayResearchProvider
from .schema import ClaimPayload, LogisticsResponse, MediaResponse, ResearchResponse
from .translator import parse_claim, parse_logistics, parse_media, parse_research

__all__ = [
    "ClaimPayload",
    "GatewayLogisticsProvider",
    "GatewayMediaValidator",
    "GatewayResearchProvider",
    "LogisticsResponse",
    "MediaResponse",
    "ResearchResponse",
    "parse_claim",
    "parse_logistics",
    "parse_media",
    "parse_research",
]
