from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from enricher.adapters.sqlalchemy import SqlAlchemyEnrichedItemRepository
from enricher.domain.model import EnrichedItem, ItemStatus, ReadinessResult
from enricher.domain.pipeline import input_hash

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _item(title: str, status: ItemStatus, score: float | None = None) -> EnrichedItem:
    item = EnrichedItem(input_raw=title, input_hash=input_hash(title), status=status)
    if score is not None:
        item.readiness = ReadinessResult(overall_score=score, is_ready=score >= 0.7)
    return item


def test_add_and_get_by_hash(sqlite_engine: Engine) -> None:
    item = _item("HP CF234A Toner", ItemStatus.OK, 0.91)

    with Session(sqlite_engine) as session:
        repository = SqlAlchemyEnrichedItemRepository(session)
        stored = repository.add(item)
        session.commit()

    assert stored.id == item.id
    assert stored.status is ItemStatus.OK
    assert stored.overall_score == 0.91
    assert stored.record["input_raw"] == "HP CF234A Toner"
    assert stored.created_at is not None
    assert stored.created_at.tzinfo is not None

    with Session(sqlite_engine) as session:
        fetched = SqlAlchemyEnrichedItemRepository(session).get_by_hash(item.input_hash)
        missing = SqlAlchemyEnrichedItemRepository(session).get_by_hash("0" * 64)

    assert fetched == stored
    assert missing is None


def test_add_replaces_existing_row(sqlite_engine: Engine) -> None:
    first = _item("HP CF234A Toner", ItemStatus.NEEDS_REVIEW, 0.5)
    second = _item("HP CF234A Toner", ItemStatus.OK, 0.93)
    second.approved_at = datetime(2025, 3, 3, 10, 0, tzinfo=UTC)

    with Session(sqlite_engine) as session:
        repository = SqlAlchemyEnrichedItemRepository(session)
        original = repository.add(first)
        replaced = repository.add(second)
        session.commit()
        rows = repository.list()

    assert len(rows) == 1
    assert replaced.id == original.id
    assert replaced.status is ItemStatus.OK
    assert replaced.overall_score == 0.93
    assert replaced.created_at == original.created_at
    assert replaced.record["approved_at"] == "2025-03-03T10:00:00+00:00"


def test_list_filters_and_limits(sqlite_engine: Engine) -> None:
    with Session(sqlite_engine) as session:
        repository = SqlAlchemyEnrichedItemRepository(session)
        repository.add(_item("HP CF234A Toner", ItemStatus.OK, 0.9))
        repository.add(_item("Canon 725 Toner", ItemStatus.NEEDS_REVIEW, 0.6))
        repository.add(_item("Brother TN-2375", ItemStatus.FAILED))
        session.commit()

        review = repository.list(status=ItemStatus.NEEDS_REVIEW)
        limited = repository.list(limit=2)
        everything = repository.list()

    assert [row.input_raw for row in review] == ["Canon 725 Toner"]
    assert len(limited) == 2
    assert {row.status for row in everything} == set(ItemStatus)
    assert next(row for row in everything if row.status is ItemStatus.FAILED).overall_score is None
