"""Entry point of the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from tracker_sync.config.sync import SyncConfig
from tracker_sync.domain.errors import SessionNotEligibleError

from .attendee_sync import AttendeeSync, Clock, is_eligible, utc_now, utc_today
from .event_discovery import find_unmatched_events, run_event_discovery
from .guard import RunGuard
from .results import CombinedSyncResult

if TYPE_CHECKING:
    from tracker_sync.domain.ports.persistence import AttendanceRecords
    from tracker_sync.domain.ports.registration import EventConfigCheck, RegistrationSource

    from .results import AttendeeSyncResult, DiscoveryResult, UnmatchedEvent

log = getLogger(__name__)


@dataclass(slots=True)
class SyncService:
    """Runs discovery and attendee sync, one writing run at a time.

    A run requested while another is in flight on the same :class:`RunGuard`
    fails immediately with :class:`SyncInProgressError` instead of queueing.
    Services built for one process share a guard.
    """

    source: RegistrationSource
    records: AttendanceRecords
    config: SyncConfig = field(default_factory=SyncConfig)
    clock: Clock = utc_now
    guard: RunGuard = field(default_factory=RunGuard)

    @property
    def running(self) -> bool:
        return self.guard.running

    def _attendee_sync(self) -> AttendeeSync:
        return AttendeeSync(
            source=self.source,
            records=self.records,
            config=self.config,
            clock=self.clock,
        )

    async def run_event_discovery(self) -> DiscoveryResult:
        async with self.guard.hold("event discovery"):
            return await run_event_discovery(self.source, self.records)

    async def run_attendee_sync(self) -> AttendeeSyncResult:
        async with self.guard.hold("attendee sync"):
            return await self._attendee_sync().run()

    async def run_combined_sync(self) -> CombinedSyncResult:
        """Discovery, then attendee sync over every eligible session."""

        async with self.guard.hold("combined sync"):
            sessions = await run_event_discovery(self.source, self.records)
            attendees = await self._attendee_sync().run()
        result = CombinedSyncResult(sessions=sessions, attendees=attendees)
        log.info("Sync complete: %s", result.summary)
        return result

    async def refresh_session(self, session_id: int) -> AttendeeSyncResult:
        """Re-run the attendee sync for one future, linked session."""

        async with self.guard.hold(f"refresh of session {session_id}"):
            sessions = await self.records.list_sessions()
            session = next((s for s in sessions if s.id == session_id), None)
            if session is None:
                raise SessionNotEligibleError(f"Session {session_id} not found")
            if not is_eligible(session, utc_today(self.clock)):
                raise SessionNotEligibleError(
                    f"Session {session_id} is in the past or has no Eventbrite event"
                )
            return await self._attendee_sync().sync_session(session)

    async def list_unmatched_events(self) -> list[UnmatchedEvent]:
        """Series events with no Group; read-only, so not behind the run guard."""

        return await find_unmatched_events(self.source, self.records)

    async def check_event_config(self, external_event_id: str) -> EventConfigCheck:
        return await self.source.get_event_config(external_event_id)


__all__ = ["SyncService"]
