"""Turn the organisation's live events into Sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC
from logging import getLogger
from typing import TYPE_CHECKING

from tracker_sync.domain.model import NewSession

from .results import DiscoveryResult, UnmatchedEvent

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from tracker_sync.domain.model import Group, Session
    from tracker_sync.domain.ports.persistence import AttendanceRecords
    from tracker_sync.domain.ports.registration import ExternalEvent, RegistrationSource

log = getLogger(__name__)


@dataclass(slots=True)
class DiscoveryPlan:
    total_events: int = 0
    matched_events: int = 0
    skipped: int = 0
    new_sessions: list[NewSession] = field(default_factory=list["NewSession"])
    unmatched_events: list[UnmatchedEvent] = field(default_factory=list["UnmatchedEvent"])


def event_date(event: ExternalEvent) -> date | None:
    """UTC calendar date of the event start."""

    if event.start is None:
        return None
    start = event.start if event.start.tzinfo else event.start.replace(tzinfo=UTC)
    return start.astimezone(UTC).date()


def session_key(day: date, label: str) -> str:
    return f"{day.isoformat()} {label}".strip()


def plan_discovery(
    events: Iterable[ExternalEvent],
    groups: Iterable[Group],
    sessions: Iterable[Session],
) -> DiscoveryPlan:
    """Classify events without touching the store.

    Series events are routed through the Group carrying their series id; a
    series with no Group is reported as unmatched and gets no Session.
    Standalone events get a Session without a Group.
    """

    groups_by_series = {group.series_id: group for group in groups if group.series_id}
    known_event_ids = {s.external_event_id for s in sessions if s.external_event_id}
    plan = DiscoveryPlan()

    for event in events:
        plan.total_events += 1
        day = event_date(event)
        if day is None:
            plan.skipped += 1
            log.warning("Skipping event %s without a start date", event.external_id)
            continue

        exists = event.external_id in known_event_ids
        if event.series_id:
            group = groups_by_series.get(event.series_id)
            if group is None:
                if not exists:
                    plan.unmatched_events.append(
                        UnmatchedEvent(external_id=event.external_id, name=event.name, date=day)
                    )
                continue
            plan.matched_events += 1
            if exists:
                continue
            draft = NewSession(
                key=session_key(day, group.key),
                date=day,
                name=event.name or None,
                group_id=group.id,
                external_event_id=event.external_id,
                url=event.url,
                description=event.description,
            )
        else:
            if exists:
                continue
            draft = NewSession(
                key=session_key(day, event.name),
                date=day,
                name=event.name or None,
                external_event_id=event.external_id,
                url=event.url,
                description=event.description,
            )

        plan.new_sessions.append(draft)
        known_event_ids.add(event.external_id)

    return plan


async def _plan(source: RegistrationSource, records: AttendanceRecords) -> DiscoveryPlan:
    events = [event async for event in source.iter_org_events()]
    log.info("Fetched %s live events", len(events))
    return plan_discovery(events, await records.list_groups(), await records.list_sessions())


async def run_event_discovery(
    source: RegistrationSource,
    records: AttendanceRecords,
) -> DiscoveryResult:
    """Create a Session for every live event that has none yet."""

    plan = await _plan(source, records)
    for draft in plan.new_sessions:
        session_id = await records.create_session(draft)
        log.info("Created session %s (ID: %s)", draft.key, session_id)

    for unmatched in plan.unmatched_events:
        log.info("No group for series event %s (%s)", unmatched.external_id, unmatched.name)

    log.info(
        "Sessions: %s total events, %s matched, %s new sessions",
        plan.total_events,
        plan.matched_events,
        len(plan.new_sessions),
    )
    return DiscoveryResult(
        total_events=plan.total_events,
        matched_events=plan.matched_events,
        new_sessions=len(plan.new_sessions),
        unmatched_events=plan.unmatched_events,
        skipped=plan.skipped,
    )


async def find_unmatched_events(
    source: RegistrationSource,
    records: AttendanceRecords,
) -> list[UnmatchedEvent]:
    return (await _plan(source, records)).unmatched_events


__all__ = [
    "DiscoveryPlan",
    "event_date",
    "find_unmatched_events",
    "plan_discovery",
    "run_event_discovery",
    "session_key",
]
