from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from sqlalchemy import inspect
from sqlalchemy.engine import Engine  # noqa: TC002

from enricher.adapters.sqlalchemy.mappings import UTCDateTime, enriched_item_table


def test_enriched_items_table_layout(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    columns = {column["name"] for column in inspector.get_columns("enriched_items")}
    indexes = {index["name"] for index in inspector.get_indexes("enriched_items")}

    assert columns == {column.name for column in enriched_item_table.columns}
    assert "ix_enriched_items_status" in indexes


def test_utc_datetime_normalizes_timezones(sqlite_engine: Engine) -> None:
    decorator = UTCDateTime()
    dialect = sqlite_engine.dialect
    moscow = timezone(timedelta(hours=3))

    bound = decorator.process_bind_param(datetime(2025, 3, 1, 15, 0, tzinfo=moscow), dialect)
    naive = decorator.process_bind_param(datetime(2025, 3, 1, 12, 0), dialect)
    loaded = decorator.process_result_value(datetime(2025, 3, 1, 12, 0), dialect)

    assert bound == datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
    assert naive == datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
    assert loaded is not None
    assert loaded.tzinfo is UTC
    assert decorator.process_bind_param(None, dialect) is None
