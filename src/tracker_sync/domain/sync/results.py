"""Counters and non-fatal failures reported by a sync run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


@dataclass(slots=True, frozen=True)
class UnmatchedEvent:
    """A series event whose series has no Group yet."""

    external_id: str
    name: str
    date: date | None


@dataclass(slots=True)
class DiscoveryResult:
    total_events: int = 0
    matched_events: int = 0
    new_sessions: int = 0
    unmatched_events: list[UnmatchedEvent] = field(default_factory=list["UnmatchedEvent"])
    skipped: int = 0


@dataclass(slots=True, frozen=True)
class SessionSyncError:
    session_id: int
    external_event_id: str
    message: str


@dataclass(slots=True)
class AttendeeSyncResult:
    sessions_processed: int = 0
    new_profiles: int = 0
    new_entries: int = 0
    new_records: int = 0
    skipped: int = 0
    errors: list[SessionSyncError] = field(default_factory=list["SessionSyncError"])


@dataclass(slots=True, frozen=True)
class CombinedSyncResult:
    sessions: DiscoveryResult
    attendees: AttendeeSyncResult

    @property
    def summary(self) -> str:
        s, a = self.sessions, self.attendees
        line = (
            f"{s.total_events} events, {s.matched_events} matched, "
            f"{s.new_sessions} new sessions / {a.sessions_processed} sessions, "
            f"{a.new_profiles} new profiles, {a.new_entries} new entries, "
            f"{a.new_records} consent records"
        )
        if a.errors:
            line += f" ({len(a.errors)} errors)"
        return line


__all__ = [
    "AttendeeSyncResult",
    "CombinedSyncResult",
    "DiscoveryResult",
    "SessionSyncError",
    "UnmatchedEvent",
]
