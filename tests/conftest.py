from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from tracker_sync.adapters.sqlalchemy import create_all_tables

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def list_store_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with none of the application's variables set."""

    for name in (
        "EVENTBRITE_API_KEY",
        "EVENTBRITE_ORGANIZATION_ID",
        "SHAREPOINT_SITE_URL",
        "SHAREPOINT_TENANT_ID",
        "SHAREPOINT_CLIENT_ID",
        "SHAREPOINT_CLIENT_SECRET",
        "GROUPS_LIST_GUID",
        "SESSIONS_LIST_GUID",
        "PROFILES_LIST_GUID",
        "ENTRIES_LIST_GUID",
        "RECORDS_LIST_GUID",
        "RECORD_STORE",
        "RECORD_FIELD_LAYOUT",
        "TRACKER_SYNC_DATA_DIR",
        "DATABASE_URI",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
