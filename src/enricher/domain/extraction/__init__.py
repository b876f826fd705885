"""Extraction normalizer: supplier title to candidate field claims."""

from __future__ import annotations

from .attributes import AttributeDetection, detect_color, detect_type, extract_device_candidates
from .brands import BrandDetection, detect_brand
from .canonical import NormalizationStep, canonicalize_title, collapse_whitespace
from .model_patterns import ModelCandidate, ModelExtraction, extract_model, find_model_candidates
from .normalizer import ExtractionResult, extract_claims
from .yields import YieldExtraction, format_amount, parse_yield, standardize_yields

__all__ = [
    "AttributeDetection",
    "BrandDetection",
    "ExtractionResult",
    "ModelCandidate",
    "ModelExtraction",
    "NormalizationStep",
    "YieldExtraction",
    "canonicalize_title",
    "collapse_whitespace",
    "detect_brand",
    "detect_color",
    "detect_type",
    "extract_claims",
    "extract_device_candidates",
    "extract_model",
    "find_model_candidates",
    "format_amount",
    "parse_yield",
    "standardize_yields",
]
