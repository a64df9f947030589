"""SharePoint (Microsoft Graph) record store configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_choice, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

GRAPH_BASE_URL: Final[str] = "https://graph.microsoft.com/v1.0/"
GRAPH_SCOPE: Final[str] = "https://graph.microsoft.com/.default"
GRAPH_TIMEOUT_SECONDS: Final[float] = 30.0
FIELD_LAYOUTS: Final[tuple[str, ...]] = ("current", "legacy")


@dataclass(frozen=True, slots=True)
class ListIds:
    """Graph list identifiers, one per record collection."""

    groups: str
    sessions: str
    profiles: str
    entries: str
    consent_records: str | None = None


@dataclass(frozen=True)
class SharePointConfig:
    site_url: str
    tenant_id: str
    client_id: str
    client_secret: str
    lists: ListIds
    resilience: ResilienceConfig

    @property
    def token_url(self) -> str:
        return f"https://login.microsoftonline.com/{self.tenant_id}/oauth2/v2.0/token"


def default_graph_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="graph",
        base_url=GRAPH_BASE_URL,
        timeout_seconds=GRAPH_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Accept": "application/json"},
    )


def get_sharepoint_config(*, resilience: ResilienceConfig | None = None) -> SharePointConfig:
    values = require_env_vars(
        (
            "SHAREPOINT_SITE_URL",
            "SHAREPOINT_TENANT_ID",
            "SHAREPOINT_CLIENT_ID",
            "SHAREPOINT_CLIENT_SECRET",
            "GROUPS_LIST_GUID",
            "SESSIONS_LIST_GUID",
            "PROFILES_LIST_GUID",
            "ENTRIES_LIST_GUID",
        )
    )
    return SharePointConfig(
        site_url=values["SHAREPOINT_SITE_URL"],
        tenant_id=values["SHAREPOINT_TENANT_ID"],
        client_id=values["SHAREPOINT_CLIENT_ID"],
        client_secret=values["SHAREPOINT_CLIENT_SECRET"],
        lists=ListIds(
            groups=values["GROUPS_LIST_GUID"],
            sessions=values["SESSIONS_LIST_GUID"],
            profiles=values["PROFILES_LIST_GUID"],
            entries=values["ENTRIES_LIST_GUID"],
            consent_records=optional_env_var("RECORDS_LIST_GUID"),
        ),
        resilience=resilience or default_graph_resilience(),
    )


def get_field_layout_name() -> str:
    """Return which column naming the record store uses (``current`` or ``legacy``)."""

    return env_choice("RECORD_FIELD_LAYOUT", FIELD_LAYOUTS, default="current")
