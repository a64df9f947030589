"""Append-only attendance sync for sessions that are still ahead of us."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from tracker_sync.config.sync import SyncConfig
from tracker_sync.domain.errors import RegistrationAuthError, RegistrationSourceError
from tracker_sync.domain.model import (
    ConsentStatus,
    ConsentType,
    EntryTag,
    NewConsentRecord,
    NewEntry,
)

from .identity import IdentityResolver, normalize_match_key
from .results import AttendeeSyncResult, SessionSyncError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from tracker_sync.domain.model import Session
    from tracker_sync.domain.ports.persistence import AttendanceRecords
    from tracker_sync.domain.ports.registration import ExternalAttendee, RegistrationSource

log = getLogger(__name__)

type Clock = Callable[[], datetime]

_LAST = datetime.max.replace(tzinfo=UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_today(clock: Clock) -> date:
    now = clock()
    if now.tzinfo is not None:
        now = now.astimezone(UTC)
    return now.date()


def is_eligible(session: Session, today: date) -> bool:
    """Past sessions are frozen; only linked sessions from today on are synced."""

    return bool(session.external_event_id) and session.date >= today


def eligible_sessions(sessions: Iterable[Session], today: date) -> list[Session]:
    """Eligible sessions, oldest first so later consent answers win."""

    return sorted(
        (session for session in sessions if is_eligible(session, today)),
        key=lambda session: (session.date, session.id),
    )


def _registration_order(attendee: ExternalAttendee) -> datetime:
    registered = attendee.registered_at
    if registered is None:
        return _LAST
    return registered if registered.tzinfo else registered.replace(tzinfo=UTC)


@dataclass(slots=True)
class _RunState:
    """What this run has written, in case store listings lag behind."""

    resolver: IdentityResolver
    entry_pairs: set[tuple[int, int]] = field(default_factory=set[tuple[int, int]])
    profiles_with_entries: set[int] = field(default_factory=set[int])
    consent_ids: dict[tuple[int, ConsentType], int] = field(
        default_factory=dict[tuple[int, ConsentType], int]
    )


@dataclass(slots=True)
class AttendeeSync:
    source: RegistrationSource
    records: AttendanceRecords
    config: SyncConfig = field(default_factory=SyncConfig)
    clock: Clock = utc_now

    async def run(self) -> AttendeeSyncResult:
        today = utc_today(self.clock)
        sessions = eligible_sessions(await self.records.list_sessions(), today)
        log.info("%s live sessions with Eventbrite IDs", len(sessions))

        result = AttendeeSyncResult()
        state = self._new_state()
        for session in sessions:
            await self._sync_session(session, state, result)

        log.info(
            "Done: %s sessions, %s new profiles, %s new entries, %s new records",
            result.sessions_processed,
            result.new_profiles,
            result.new_entries,
            result.new_records,
        )
        return result

    async def sync_session(self, session: Session) -> AttendeeSyncResult:
        """Sync a single session; the caller checks eligibility."""

        result = AttendeeSyncResult()
        await self._sync_session(session, self._new_state(), result)
        return result

    def _new_state(self) -> _RunState:
        return _RunState(resolver=IdentityResolver(self.records))

    async def _sync_session(
        self,
        session: Session,
        state: _RunState,
        result: AttendeeSyncResult,
    ) -> None:
        external_id = session.external_event_id
        if not external_id:
            return

        try:
            attendees = await self._fetch_attendees(external_id)
        except RegistrationAuthError:
            raise
        except RegistrationSourceError as exc:
            log.warning("Session %s (%s): attendee fetch failed: %s", session.id, external_id, exc)
            result.errors.append(
                SessionSyncError(
                    session_id=session.id,
                    external_event_id=external_id,
                    message=str(exc),
                )
            )
            return

        log.info("Session %s (%s): %s attendees", session.id, external_id, len(attendees))
        result.sessions_processed += 1
        run_time = self.clock()
        for attendee in attendees:
            await self._apply_attendee(session, attendee, state, result, run_time)

    async def _fetch_attendees(self, external_event_id: str) -> list[ExternalAttendee]:
        """Fetch every page before any write, then order by registration time."""

        attendees = [attendee async for attendee in self.source.iter_attendees(external_event_id)]
        return sorted(attendees, key=_registration_order)

    def _is_placeholder(self, name: str) -> bool:
        placeholders = {normalize_match_key(p) for p in self.config.placeholder_names}
        return normalize_match_key(name) in placeholders

    def _is_child(self, attendee: ExternalAttendee) -> bool:
        label = (attendee.ticket_type or "").casefold()
        return self.config.child_keyword.casefold() in label

    async def _apply_attendee(
        self,
        session: Session,
        attendee: ExternalAttendee,
        state: _RunState,
        result: AttendeeSyncResult,
        run_time: datetime,
    ) -> None:
        name = (attendee.name or "").strip()
        if not name or self._is_placeholder(name):
            result.skipped += 1
            log.debug("Session %s: skipping placeholder attendee %r", session.id, attendee.name)
            return

        resolution = await state.resolver.resolve(name, email=attendee.email)
        if resolution.created:
            result.new_profiles += 1
        profile_id = resolution.profile_id

        if await self._create_entry_if_missing(session, profile_id, attendee, state):
            result.new_entries += 1

        if self.records.consent_available:
            result.new_records += await self._upsert_consent(profile_id, attendee, state, run_time)

    async def _create_entry_if_missing(
        self,
        session: Session,
        profile_id: int,
        attendee: ExternalAttendee,
        state: _RunState,
    ) -> bool:
        entries = await self.records.list_entries()
        pair = (session.id, profile_id)
        if pair in state.entry_pairs or any(
            (entry.session_id, entry.profile_id) == pair for entry in entries
        ):
            return False

        tags: list[EntryTag] = []
        first_entry = profile_id not in state.profiles_with_entries and not any(
            entry.profile_id == profile_id for entry in entries
        )
        if first_entry:
            tags.append(EntryTag.NEW)
        if self._is_child(attendee):
            tags.append(EntryTag.CHILD)
        tags.append(EntryTag.EVENTBRITE)

        entry_id = await self.records.create_entry(
            NewEntry(
                session_id=session.id,
                profile_id=profile_id,
                fiscal_year=session.fiscal_year,
                tags=tags,
            )
        )
        state.entry_pairs.add(pair)
        state.profiles_with_entries.add(profile_id)
        log.debug("Session %s: created entry %s for profile %s", session.id, entry_id, profile_id)
        return True

    async def _upsert_consent(
        self,
        profile_id: int,
        attendee: ExternalAttendee,
        state: _RunState,
        run_time: datetime,
    ) -> int:
        """Latest answer wins: overwrite the one record per (profile, type)."""

        written = 0
        answered_at = attendee.registered_at or run_time
        for answer in attendee.answers:
            consent_type = self.config.consent_questions.get(answer.question_id)
            value = (answer.value or "").strip()
            if consent_type is None or not value:
                continue

            status = (
                ConsentStatus.ACCEPTED
                if value.casefold() == self.config.accepted_answer.casefold()
                else ConsentStatus.DECLINED
            )
            key = (profile_id, consent_type)
            record_id = state.consent_ids.get(key)
            if record_id is None:
                record_id = next(
                    (
                        record.id
                        for record in await self.records.list_consent_records()
                        if record.profile_id == profile_id and record.type == consent_type
                    ),
                    None,
                )

            if record_id is None:
                record_id = await self.records.create_consent_record(
                    NewConsentRecord(
                        profile_id=profile_id,
                        type=consent_type,
                        status=status,
                        date=answered_at,
                    )
                )
            else:
                await self.records.update_consent_record(
                    record_id, status=status, date=answered_at
                )
            state.consent_ids[key] = record_id
            written += 1
        return written


__all__ = [
    "AttendeeSync",
    "Clock",
    "eligible_sessions",
    "is_eligible",
    "utc_now",
    "utc_today",
]
