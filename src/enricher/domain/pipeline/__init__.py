"""Orchestration coordinator and its collaborator plumbing."""

from __future__ import annotations

from .collaborators import CallOutcome, PipelineSettings, call_collaborator
from .coordinator import Coordinator, PipelineHandle
from .errors import (
    CollaboratorUnavailableError,
    EnrichmentError,
    FrozenItemError,
    MalformedResponseError,
    TrustRegressionError,
)
from .identity import canonical_input, input_hash

__all__ = [
    "CallOutcome",
    "CollaboratorUnavailableError",
    "Coordinator",
    "EnrichmentError",
    "FrozenItemError",
    "MalformedResponseError",
    "PipelineHandle",
    "PipelineSettings",
    "TrustRegressionError",
    "call_collaborator",
    "canonical_input",
    "input_hash",
]
