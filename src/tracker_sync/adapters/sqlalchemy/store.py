"""List store backed by a local SQL database (SQLite by default)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from tracker_sync.config.storage import get_database_config
from tracker_sync.domain.errors import RecordStoreError
from tracker_sync.domain.model import Collection

from .tables import LIST_TABLES, create_all_tables

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from sqlalchemy import Row, Select, Table
    from sqlalchemy.engine import Engine

    from tracker_sync.domain.ports.store import ListStore, RawItem

log = getLogger(__name__)


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _flatten(row: Row[Any], select_fields: Sequence[str] | None) -> RawItem:
    fields: Mapping[str, Any] = row.fields or {}
    if select_fields is not None:
        fields = {name: value for name, value in fields.items() if name in select_fields}
    item: RawItem = {"ID": row.id}
    item.update(fields)
    item["Created"] = _format_timestamp(row.created)
    item["Modified"] = _format_timestamp(row.modified)
    return item


def create_sqlite_engine(database_uri: str | None = None) -> Engine:
    uri = database_uri or get_database_config().uri
    engine = create_engine(uri, future=True)
    create_all_tables(engine)
    return engine


@dataclass(slots=True)
class SqlAlchemyListStore:
    """Each collection is a table of ``(id, created, modified, fields JSON)``.

    Statements run synchronously on the event loop thread. SQLAlchemy pools an
    in-memory SQLite database per thread, so worker threads would each see an
    empty database.
    """

    engine: Engine = field(default_factory=create_sqlite_engine)
    collections: frozenset[Collection] = frozenset(Collection)
    clock: Callable[[], datetime] = _utc_now

    def has_collection(self, collection: Collection) -> bool:
        return collection in self.collections

    async def list_items(
        self,
        collection: Collection,
        select: Sequence[str] | None = None,
    ) -> list[RawItem]:
        table = self._table(collection)
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(_select_all(table)).all()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to list {collection}: {exc}") from exc
        log.debug("Listed %s %s rows", len(rows), collection)
        return [_flatten(row, select) for row in rows]

    async def create_item(self, collection: Collection, fields: Mapping[str, Any]) -> int:
        table = self._table(collection)
        now = self.clock()
        try:
            with self.engine.begin() as connection:
                result = connection.execute(
                    insert(table).values(created=now, modified=now, fields=dict(fields))
                )
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to create {collection} item: {exc}") from exc
        primary_key = result.inserted_primary_key
        if primary_key is None:
            raise RecordStoreError(f"No id returned for new {collection} item")
        return int(primary_key[0])

    async def update_item(
        self,
        collection: Collection,
        item_id: int,
        fields: Mapping[str, Any],
    ) -> None:
        table = self._table(collection)
        try:
            with self.engine.begin() as connection:
                current = connection.execute(
                    select(table.c.fields).where(table.c.id == item_id)
                ).scalar_one_or_none()
                if current is None:
                    message = f"{collection} item {item_id} not found"
                    raise RecordStoreError(message, status_code=404)
                merged = {**current, **fields}
                connection.execute(
                    update(table)
                    .where(table.c.id == item_id)
                    .values(fields=merged, modified=self.clock())
                )
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to update {collection} item: {exc}") from exc

    async def delete_item(self, collection: Collection, item_id: int) -> None:
        table = self._table(collection)
        try:
            with self.engine.begin() as connection:
                result = connection.execute(delete(table).where(table.c.id == item_id))
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to delete {collection} item: {exc}") from exc
        if result.rowcount == 0:
            raise RecordStoreError(f"{collection} item {item_id} not found", status_code=404)

    def seed(self, collection: Collection, items: Iterable[Mapping[str, Any]]) -> list[int]:
        """Insert operator-owned rows (e.g. Groups) outside the sync path."""

        now = self.clock()
        table = self._table(collection)
        with self.engine.begin() as connection:
            return [
                int(
                    connection.execute(
                        insert(table).values(created=now, modified=now, fields=dict(item))
                    ).inserted_primary_key[0]
                )
                for item in items
            ]

    def _table(self, collection: Collection) -> Table:
        if not self.has_collection(collection):
            raise RecordStoreError(f"No table configured for {collection}")
        return LIST_TABLES[collection]


def _select_all(table: Table) -> Select[tuple[int, datetime, datetime, dict[str, Any]]]:
    return select(table.c.id, table.c.created, table.c.modified, table.c.fields).order_by(
        table.c.id
    )


if TYPE_CHECKING:
    _store_check: ListStore = SqlAlchemyListStore()
