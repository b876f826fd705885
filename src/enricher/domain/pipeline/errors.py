"""Exceptions raised across the enrichment pipeline."""

from __future__ import annotations

from enricher.domain.model import FrozenItemError, TrustRegressionError


class EnrichmentError(Exception):
    """Base class for pipeline failures."""


class CollaboratorUnavailableError(EnrichmentError):
    """A collaborator timed out or could not be reached."""

    def __init__(self, collaborator: str, message: str) -> None:
        self.collaborator = collaborator
        super().__init__(f"{collaborator}: {message}")


class MalformedResponseError(EnrichmentError):
    """A collaborator answered with data that fails schema checks."""

    def __init__(self, collaborator: str, message: str) -> None:
        self.collaborator = collaborator
        super().__init__(f"{collaborator}: {message}")


__all__ = [
    "CollaboratorUnavailableError",
    "EnrichmentError",
    "FrozenItemError",
    "MalformedResponseError",
    "TrustRegressionError",
]
