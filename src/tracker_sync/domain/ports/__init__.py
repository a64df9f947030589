"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import AttendanceRecords
from .registration import (
    CustomAnswer,
    EventConfigCheck,
    ExternalAttendee,
    ExternalEvent,
    RegistrationSource,
)
from .store import ListStore, RawItem

__all__ = [
    "AttendanceRecords",
    "CustomAnswer",
    "EventConfigCheck",
    "ExternalAttendee",
    "ExternalEvent",
    "ListStore",
    "RawItem",
    "RegistrationSource",
]
