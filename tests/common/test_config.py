from __future__ import annotations

from pathlib import Path

import pytest

from tracker_sync.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_database_config,
    get_eventbrite_config,
    get_field_layout_name,
    get_record_store_name,
    get_sharepoint_config,
    get_storage_config,
    get_sync_config,
    require_env_vars,
)
from tracker_sync.domain.model import ConsentType

SHAREPOINT_ENV = {
    "SHAREPOINT_SITE_URL": "https://contoso.sharepoint.com/sites/Tracker",
    "SHAREPOINT_TENANT_ID": "tenant-1",
    "SHAREPOINT_CLIENT_ID": "client-1",
    "SHAREPOINT_CLIENT_SECRET": "secret-1",
    "GROUPS_LIST_GUID": "L-GROUPS",
    "SESSIONS_LIST_GUID": "L-SESSIONS",
    "PROFILES_LIST_GUID": "L-PROFILES",
    "ENTRIES_LIST_GUID": "L-ENTRIES",
}


def test_require_env_vars_lists_every_missing_name(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("EVENTBRITE_API_KEY", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["EVENTBRITE_API_KEY", "EVENTBRITE_ORGANIZATION_ID"])

    assert exc.value.names == ("EVENTBRITE_API_KEY", "EVENTBRITE_ORGANIZATION_ID")
    assert "EVENTBRITE_ORGANIZATION_ID" in str(exc.value)


def test_eventbrite_config(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("EVENTBRITE_API_KEY", " key ")
    clean_env.setenv("EVENTBRITE_ORGANIZATION_ID", "ORG1")

    config = get_eventbrite_config()

    assert config.api_key == "key"
    assert config.organization_id == "ORG1"
    assert config.resilience.base_url == "https://www.eventbriteapi.com/v3/"
    assert config.resilience.retry is not None
    assert config.resilience.retry.allowed_methods == frozenset({"GET"})


def test_sharepoint_config_with_optional_records_list(clean_env: pytest.MonkeyPatch) -> None:
    for name, value in SHAREPOINT_ENV.items():
        clean_env.setenv(name, value)

    config = get_sharepoint_config()

    assert config.lists.consent_records is None
    assert config.token_url == "https://login.microsoftonline.com/tenant-1/oauth2/v2.0/token"

    clean_env.setenv("RECORDS_LIST_GUID", "L-RECORDS")
    assert get_sharepoint_config().lists.consent_records == "L-RECORDS"


def test_sharepoint_config_requires_credentials(clean_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(MissingConfigurationError, match="SHAREPOINT_CLIENT_SECRET"):
        get_sharepoint_config()


def test_store_and_layout_choices(clean_env: pytest.MonkeyPatch) -> None:
    assert get_record_store_name() == "sharepoint"
    assert get_field_layout_name() == "current"

    clean_env.setenv("RECORD_STORE", "SQLite")
    clean_env.setenv("RECORD_FIELD_LAYOUT", "legacy")
    assert get_record_store_name() == "sqlite"
    assert get_field_layout_name() == "legacy"

    clean_env.setenv("RECORD_FIELD_LAYOUT", "members")
    with pytest.raises(ConfigurationError, match="RECORD_FIELD_LAYOUT"):
        get_field_layout_name()


def test_database_uri_defaults_to_data_dir(
    clean_env: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    clean_env.setenv("TRACKER_SYNC_DATA_DIR", str(tmp_path / "data"))

    storage = get_storage_config()
    database = get_database_config(storage=storage)

    expected_path = (tmp_path / "data").resolve() / "tracker.db"
    assert database.uri == f"sqlite+pysqlite:///{expected_path}"
    assert (tmp_path / "data").is_dir()

    clean_env.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_sync_config_defaults() -> None:
    config = get_sync_config()

    assert config.consent_questions["315115173"] is ConsentType.PRIVACY
    assert config.consent_questions["315115803"] is ConsentType.PHOTO
    assert "info requested" in config.placeholder_names
    assert config.child_keyword == "child"
