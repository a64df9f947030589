"""Wire the configured adapters into a :class:`SyncService`."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from tracker_sync.adapters.eventbrite import EventbriteClient
from tracker_sync.adapters.records import ListRecordRepository, get_field_layout
from tracker_sync.adapters.sharepoint import GraphListStore
from tracker_sync.adapters.sqlalchemy import SqlAlchemyListStore, create_sqlite_engine
from tracker_sync.common import CollectionCache
from tracker_sync.config import (
    get_eventbrite_config,
    get_field_layout_name,
    get_record_store_name,
    get_sharepoint_config,
    get_sync_config,
)
from tracker_sync.domain.sync import RunGuard, SyncService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tracker_sync.adapters.records import FieldLayout
    from tracker_sync.config import SyncConfig
    from tracker_sync.domain.ports import ListStore, RegistrationSource

log = getLogger(__name__)

_IN_MEMORY_DATABASES = (None, "", ":memory:")


def store_cache_key(store: ListStore) -> str | None:
    """Identify the backing lists of ``store``, or ``None`` when they are private to it."""

    match store:
        case GraphListStore(config=config):
            return f"graph:{config.site_url}:{config.lists!r}"
        case SqlAlchemyListStore(engine=engine) if engine.url.database not in _IN_MEMORY_DATABASES:
            return f"sql:{engine.url.render_as_string(hide_password=True)}"
        case _:
            return None


@dataclass(slots=True)
class SyncRuntime:
    """What every service of one process shares: the run guard and one cache per store."""

    guard: RunGuard = field(default_factory=RunGuard)
    caches: dict[str, CollectionCache] = field(default_factory=dict[str, CollectionCache])

    def cache_for(self, store: ListStore) -> CollectionCache:
        key = store_cache_key(store)
        if key is None:
            return CollectionCache()
        if key not in self.caches:
            log.debug("New collection cache for %s", key)
            self.caches[key] = CollectionCache()
        return self.caches[key]


_PROCESS_RUNTIME = SyncRuntime()


def build_list_store(name: str | None = None) -> ListStore:
    store_name = name or get_record_store_name()
    if store_name == "sqlite":
        return SqlAlchemyListStore(engine=create_sqlite_engine())
    return GraphListStore(config=get_sharepoint_config())


def build_sync_service(
    *,
    source: RegistrationSource | None = None,
    store: ListStore | None = None,
    layout: FieldLayout | None = None,
    cache: CollectionCache | None = None,
    config: SyncConfig | None = None,
    runtime: SyncRuntime | None = None,
) -> SyncService:
    effective_runtime = runtime or _PROCESS_RUNTIME
    effective_store = store or build_list_store()
    effective_layout = layout or get_field_layout(get_field_layout_name())
    records = ListRecordRepository(
        store=effective_store,
        layout=effective_layout,
        cache=cache if cache is not None else effective_runtime.cache_for(effective_store),
    )
    log.debug("Using %s field layout", effective_layout.name)
    return SyncService(
        source=source or EventbriteClient(config=get_eventbrite_config()),
        records=records,
        config=config or get_sync_config(),
        guard=effective_runtime.guard,
    )


@asynccontextmanager
async def open_sync_service(
    *,
    source: RegistrationSource | None = None,
    store: ListStore | None = None,
    layout: FieldLayout | None = None,
    cache: CollectionCache | None = None,
    runtime: SyncRuntime | None = None,
) -> AsyncIterator[SyncService]:
    """Build a service and release the record store's HTTP client afterwards."""

    effective_store = store or build_list_store()
    service = build_sync_service(
        source=source,
        store=effective_store,
        layout=layout,
        cache=cache,
        runtime=runtime,
    )
    try:
        yield service
    finally:
        if isinstance(effective_store, GraphListStore):
            await effective_store.aclose()
