"""Bounded, timed, retried calls to external collaborators."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from enricher.domain.model import ErrorKind

from .errors import CollaboratorUnavailableError, MalformedResponseError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineSettings:
    """Runtime knobs of the coordinator. Timings are not part of any contract."""

    max_concurrent_items: int = 4
    max_attempts: int = 3
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 8.0
    call_timeout_seconds: float = 30.0
    max_images: int = 3

    def __post_init__(self) -> None:
        if self.max_concurrent_items < 1:
            raise ValueError("max_concurrent_items must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.call_timeout_seconds <= 0:
            raise ValueError("call_timeout_seconds must be positive")
        if self.backoff_base_seconds < 0 or self.backoff_max_seconds < 0:
            raise ValueError("backoff timings must not be negative")
        if self.max_images < 0:
            raise ValueError("max_images must not be negative")

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the ``attempt``-th failed call (1-based)."""

        return min(self.backoff_max_seconds, self.backoff_base_seconds * 2 ** (attempt - 1))


@dataclass(frozen=True, slots=True, kw_only=True)
class CallOutcome[T]:
    collaborator: str
    value: T | None = None
    error: ErrorKind | None = None
    message: str | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


type Sleep = Callable[[float], Awaitable[object]]


async def call_collaborator[T](
    collaborator: str,
    call: Callable[[], Awaitable[T]],
    *,
    settings: PipelineSettings,
    sleep: Sleep = asyncio.sleep,
) -> CallOutcome[T]:
    """Run ``call`` with a timeout, retrying unavailability with backoff.

    Malformed responses are returned as an outcome straight away and never
    retried. Any other exception propagates to the caller.
    """

    message = "no attempt made"
    for attempt in range(1, settings.max_attempts + 1):
        try:
            async with asyncio.timeout(settings.call_timeout_seconds):
                value = await call()
        except MalformedResponseError as exc:
            log.warning("Malformed response from %s: %s", collaborator, exc)
            return CallOutcome(
                collaborator=collaborator,
                error=ErrorKind.MALFORMED_RESPONSE,
                message=str(exc),
                attempts=attempt,
            )
        except TimeoutError:
            message = f"timed out after {settings.call_timeout_seconds:g}s"
        except CollaboratorUnavailableError as exc:
            message = str(exc)
        else:
            return CallOutcome(collaborator=collaborator, value=value, attempts=attempt)

        if attempt < settings.max_attempts:
            delay = settings.backoff_delay(attempt)
            log.warning(
                "%s unavailable (attempt %d/%d): %s; retrying in %.2fs",
                collaborator,
                attempt,
                settings.max_attempts,
                message,
                delay,
            )
            await sleep(delay)

    log.warning(
        "%s unavailable after %d attempts: %s", collaborator, settings.max_attempts, message
    )
    return CallOutcome(
        collaborator=collaborator,
        error=ErrorKind.COLLABORATOR_UNAVAILABLE,
        message=message,
        attempts=settings.max_attempts,
    )
