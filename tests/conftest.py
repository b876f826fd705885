from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from enricher.adapters.sqlalchemy.mappings import create_all_tables
from enricher.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyEnrichmentUnitOfWork,
    shutdown,
    startup,
)
from enricher.domain.pipeline import Coordinator, PipelineSettings
from tests.support.collaborators import FakeLogistics, FakeMedia, FakeResearch, RecordingSleep
from tests.support.persistence import FakeItemRepository, FakeUnitOfWork

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyEnrichmentUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyEnrichmentUnitOfWork
    finally:
        shutdown()


@pytest.fixture
def research() -> FakeResearch:
    return FakeResearch()


@pytest.fixture
def logistics() -> FakeLogistics:
    return FakeLogistics()


@pytest.fixture
def media() -> FakeMedia:
    return FakeMedia()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def item_repository() -> FakeItemRepository:
    return FakeItemRepository()


@pytest.fixture
def make_coordinator(
    research: FakeResearch,
    logistics: FakeLogistics,
    media: FakeMedia,
    sleep: RecordingSleep,
    item_repository: FakeItemRepository,
) -> Callable[..., Coordinator]:
    def factory(**overrides: object) -> Coordinator:
        options: dict[str, object] = {
            "research": research,
            "logistics": logistics,
            "media": media,
            "settings": PipelineSettings(),
            "unit_of_work_factory": lambda: FakeUnitOfWork(item_repository),
            "sleep": sleep,
        }
        options.update(overrides)
        return Coordinator(**options)  # type: ignore[arg-type]

    return factory
