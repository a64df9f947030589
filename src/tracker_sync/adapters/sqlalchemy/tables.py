"""Table metadata for the local list store: one table per record collection."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import JSON, Column, DateTime, Dialect, Integer, MetaData, Table, TypeDecorator

from tracker_sync.domain.model import Collection

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _list_table(collection: Collection) -> Table:
    return Table(
        f"list_{collection.value}",
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("created", UTCDateTime(), nullable=False),
        Column("modified", UTCDateTime(), nullable=False),
        Column("fields", JSON, nullable=False, default=dict),
    )


LIST_TABLES: Final[dict[Collection, Table]] = {
    collection: _list_table(collection) for collection in Collection
}


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
