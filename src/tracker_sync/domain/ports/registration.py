"""Port for reading events and attendees from the registration platform."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from datetime import datetime


@dataclass(slots=True, frozen=True)
class ExternalEvent:
    """A live event as published by the registration platform."""

    external_id: str
    name: str
    start: datetime | None
    series_id: str | None = None
    description: str | None = None
    url: str | None = None


@dataclass(slots=True, frozen=True)
class CustomAnswer:
    question_id: str
    value: str | None
    question: str | None = None


@dataclass(slots=True, frozen=True)
class ExternalAttendee:
    """One non-cancelled registration for an event."""

    name: str | None
    ticket_type: str | None = None
    registered_at: datetime | None = None
    email: str | None = None
    answers: tuple[CustomAnswer, ...] = ()


@dataclass(slots=True, frozen=True)
class EventConfigCheck:
    """Whether an event is set up the way the attendee sync expects."""

    external_event_id: str
    has_child_ticket: bool
    has_privacy_consent_question: bool
    has_photo_consent_question: bool
    consent_questions_per_attendee: bool

    @property
    def ok(self) -> bool:
        return (
            self.has_privacy_consent_question
            and self.has_photo_consent_question
            and self.consent_questions_per_attendee
        )


@runtime_checkable
class RegistrationSource(Protocol):
    """Read-only access to the registration platform.

    Both iterators are lazy and finite; each call starts a fresh pagination and the
    result should be consumed exactly once.
    """

    def iter_org_events(self) -> AsyncIterator[ExternalEvent]: ...

    def iter_attendees(self, external_event_id: str) -> AsyncIterator[ExternalAttendee]: ...

    async def get_event_config(self, external_event_id: str) -> EventConfigCheck: ...


__all__ = [
    "CustomAnswer",
    "EventConfigCheck",
    "ExternalAttendee",
    "ExternalEvent",
    "RegistrationSource",
]
