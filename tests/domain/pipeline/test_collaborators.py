from __future__ import annotations

import asyncio

import pytest

from enricher.domain.model import ErrorKind
from enricher.domain.pipeline import (
    CollaboratorUnavailableError,
    MalformedResponseError,
    PipelineSettings,
    call_collaborator,
)
from tests.support.collaborators import RecordingSleep


class _Flaky:
    def __init__(self, *errors: BaseException) -> None:
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def test_success_after_retries() -> None:
    call = _Flaky(CollaboratorUnavailableError("research", "down"))
    sleep = RecordingSleep()

    outcome = asyncio.run(
        call_collaborator("research", call, settings=PipelineSettings(), sleep=sleep)
    )

    assert outcome.ok
    assert outcome.value == "ok"
    assert outcome.attempts == 2
    assert sleep.delays == [0.5]


def test_gives_up_after_max_attempts() -> None:
    call = _Flaky(*(CollaboratorUnavailableError("media", "down") for _ in range(5)))
    sleep = RecordingSleep()
    settings = PipelineSettings(max_attempts=4)

    outcome = asyncio.run(call_collaborator("media", call, settings=settings, sleep=sleep))

    assert not outcome.ok
    assert outcome.error is ErrorKind.COLLABORATOR_UNAVAILABLE
    assert outcome.message == "media: down"
    assert outcome.attempts == 4
    assert call.calls == 4
    assert sleep.delays == [0.5, 1.0, 2.0]


def test_slow_call_times_out() -> None:
    async def slow() -> str:
        await asyncio.sleep(5)
        return "late"

    settings = PipelineSettings(max_attempts=1, call_timeout_seconds=0.01)

    outcome = asyncio.run(call_collaborator("logistics", slow, settings=settings))

    assert outcome.error is ErrorKind.COLLABORATOR_UNAVAILABLE
    assert outcome.message == "timed out after 0.01s"


def test_malformed_response_returns_immediately() -> None:
    call = _Flaky(MalformedResponseError("research", "not json"))
    sleep = RecordingSleep()

    outcome = asyncio.run(
        call_collaborator("research", call, settings=PipelineSettings(), sleep=sleep)
    )

    assert outcome.error is ErrorKind.MALFORMED_RESPONSE
    assert outcome.attempts == 1
    assert sleep.delays == []


def test_other_errors_propagate() -> None:
    call = _Flaky(KeyError("boom"))

    with pytest.raises(KeyError):
        asyncio.run(call_collaborator("research", call, settings=PipelineSettings()))


def test_backoff_is_capped() -> None:
    settings = PipelineSettings(backoff_base_seconds=1.0, backoff_max_seconds=3.0)

    assert [settings.backoff_delay(attempt) for attempt in range(1, 5)] == [1.0, 2.0, 3.0, 3.0]


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_concurrent_items": 0},
        {"max_attempts": 0},
        {"call_timeout_seconds": 0},
        {"backoff_base_seconds": -1.0},
        {"max_images": -1},
    ],
)
def test_settings_validation(overrides: dict[str, float]) -> None:
    with pytest.raises(ValueError):
        PipelineSettings(**overrides)  # type: ignore[arg-type]
