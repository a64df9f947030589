from __future__ import annotations

import asyncio
from datetime import date
from typing import TYPE_CHECKING

import pytest

from tests.helpers.records import FakeListStore, add_session
from tests.helpers.registration import (
    BlockingSource,
    FakeRegistrationSource,
    make_attendee,
    make_event,
)
from tracker_sync.adapters.records import LEGACY_LAYOUT
from tracker_sync.adapters.records.repository import ListRecordRepository
from tracker_sync.adapters.sharepoint import GraphListStore
from tracker_sync.adapters.sqlalchemy import SqlAlchemyListStore, create_sqlite_engine
from tracker_sync.app import (
    SyncRuntime,
    build_list_store,
    build_sync_service,
    open_sync_service,
    store_cache_key,
)
from tracker_sync.common import CollectionCache
from tracker_sync.config import ConfigurationError, ListIds, SharePointConfig
from tracker_sync.config.sharepoint import default_graph_resilience
from tracker_sync.domain.errors import SyncInProgressError
from tracker_sync.domain.model import Collection

if TYPE_CHECKING:
    from pathlib import Path


def test_sqlite_store_is_selected_by_configuration(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("RECORD_STORE", "sqlite")
    clean_env.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert isinstance(build_list_store(), SqlAlchemyListStore)


def test_sharepoint_store_needs_its_configuration(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SHAREPOINT_SITE_URL", "https://contoso.sharepoint.com/sites/Members")

    with pytest.raises(ConfigurationError):
        build_list_store()

    for name in (
        "SHAREPOINT_TENANT_ID",
        "SHAREPOINT_CLIENT_ID",
        "SHAREPOINT_CLIENT_SECRET",
        "GROUPS_LIST_GUID",
        "SESSIONS_LIST_GUID",
        "PROFILES_LIST_GUID",
        "ENTRIES_LIST_GUID",
    ):
        clean_env.setenv(name, f"{name.lower()}-value")
    assert isinstance(build_list_store("sharepoint"), GraphListStore)


def test_layout_comes_from_configuration(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("RECORD_FIELD_LAYOUT", "legacy")
    clean_env.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    service = build_sync_service(
        source=FakeRegistrationSource(),
        store=build_list_store("sqlite"),
        cache=CollectionCache(),
    )

    assert isinstance(service.records, ListRecordRepository)
    assert service.records.layout is LEGACY_LAYOUT


def test_open_sync_service_runs_against_sqlite(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("RECORD_STORE", "sqlite")
    clean_env.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    source = FakeRegistrationSource(
        events=[make_event("E1", day=date(2099, 1, 2), name="Far Future")],
        attendees={"E1": [make_attendee("Alice Smith")]},
    )

    async def scenario() -> tuple[int, int]:
        async with open_sync_service(source=source, cache=CollectionCache()) as service:
            result = await service.run_combined_sync()
            entries = await service.records.list_entries()
        return result.attendees.new_entries, len(entries)

    assert asyncio.run(scenario()) == (1, 1)


def _sharepoint_config(site_url: str) -> SharePointConfig:
    return SharePointConfig(
        site_url=site_url,
        tenant_id="tenant",
        client_id="client",
        client_secret="secret",
        lists=ListIds(groups="G", sessions="S", profiles="P", entries="E"),
        resilience=default_graph_resilience(),
    )


def test_services_of_one_runtime_share_the_run_guard(clean_env: pytest.MonkeyPatch) -> None:
    runtime = SyncRuntime()
    store = FakeListStore()
    add_session(store, date(2099, 1, 2), external_event_id="E1")
    source = BlockingSource(attendees={"E1": [make_attendee("Alice Smith")]})
    first = build_sync_service(source=source, store=store, runtime=runtime)
    second = build_sync_service(source=source, store=store, runtime=runtime)

    async def scenario() -> int:
        running = asyncio.create_task(first.run_attendee_sync())
        await source.started.wait()
        assert second.running
        with pytest.raises(SyncInProgressError, match="attendee sync is already active"):
            await second.run_attendee_sync()
        source.release.set()
        return (await running).new_entries

    assert asyncio.run(scenario()) == 1
    assert not second.running
    assert len(store.values(Collection.ENTRIES)) == 1


def test_runtime_keeps_one_cache_per_backing_store() -> None:
    runtime = SyncRuntime()
    members = GraphListStore(config=_sharepoint_config("https://contoso.sharepoint.com/sites/A"))
    members_again = GraphListStore(
        config=_sharepoint_config("https://contoso.sharepoint.com/sites/A")
    )
    tracker = GraphListStore(config=_sharepoint_config("https://contoso.sharepoint.com/sites/B"))
    local = SqlAlchemyListStore(engine=create_sqlite_engine("sqlite+pysqlite:///:memory:"))

    assert runtime.cache_for(members) is runtime.cache_for(members_again)
    assert runtime.cache_for(members) is not runtime.cache_for(tracker)
    assert runtime.cache_for(local) is not runtime.cache_for(local)
    assert store_cache_key(local) is None


def test_file_backed_sqlite_stores_share_a_cache(tmp_path: Path) -> None:
    uri = f"sqlite+pysqlite:///{tmp_path / 'tracker.db'}"
    runtime = SyncRuntime()

    first = runtime.cache_for(SqlAlchemyListStore(engine=create_sqlite_engine(uri)))
    second = runtime.cache_for(SqlAlchemyListStore(engine=create_sqlite_engine(uri)))

    assert first is second
