"""Reconciliation of registration data into the record store."""

from __future__ import annotations

from .attendee_sync import AttendeeSync, eligible_sessions, is_eligible, utc_now
from .event_discovery import (
    find_unmatched_events,
    plan_discovery,
    run_event_discovery,
    session_key,
)
from .identity import IdentityResolver, Resolution, find_profile, normalize_match_key
from .guard import RunGuard
from .results import (
    AttendeeSyncResult,
    CombinedSyncResult,
    DiscoveryResult,
    SessionSyncError,
    UnmatchedEvent,
)
from .service import SyncService

__all__ = [
    "AttendeeSync",
    "AttendeeSyncResult",
    "CombinedSyncResult",
    "DiscoveryResult",
    "IdentityResolver",
    "Resolution",
    "RunGuard",
    "SessionSyncError",
    "SyncService",
    "UnmatchedEvent",
    "eligible_sessions",
    "find_profile",
    "find_unmatched_events",
    "is_eligible",
    "normalize_match_key",
    "plan_discovery",
    "run_event_discovery",
    "session_key",
]
