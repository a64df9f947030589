"""Public interface for the Eventbrite adapter."""

from __future__ import annotations

from .client import EventbriteClient
from .schema import AttendeePayload, AttendeesPage, EventPayload, EventsPage
from .translator import translate_attendee, translate_event

__all__ = [
    "AttendeePayload",
    "AttendeesPage",
    "EventPayload",
    "EventbriteClient",
    "EventsPage",
    "translate_attendee",
    "translate_event",
]
