"""Pydantic models describing the research gateway payloads."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _stringify(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class GatewayBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ClaimPayload(GatewayBaseModel):
    field: str = Field(min_length=1)
    value: str = Field(min_length=1)
    source_type: str
    domain: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    method: str = Field(default="research_agent", alias="extraction_method")

    _normalize_value = field_validator("value", mode="before")(_stringify)

    @field_validator("field", "source_type", mode="before")
    @classmethod
    def _lowercase(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ResearchResponse(GatewayBaseModel):
    summary: str = ""
    claims: list[ClaimPayload] = Field(default_factory=list[ClaimPayload])
    source_domains: list[str] = Field(default_factory=list[str])


class LogisticsResponse(GatewayBaseModel):
    found: bool
    claim: ClaimPayload | None = None

    @model_validator(mode="after")
    def _claim_when_found(self) -> Self:
        if self.found and self.claim is None:
            raise ValueError("found logistics response carries no claim")
        return self


class MediaCheckPayload(GatewayBaseModel):
    name: str = Field(min_length=1)
    passed: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    details: str | None = None


class MediaResponse(GatewayBaseModel):
    image_url: str
    checks: list[MediaCheckPayload] = Field(default_factory=list[MediaCheckPayload])
    passed: bool
    reasons: list[str] = Field(default_factory=list[str])
