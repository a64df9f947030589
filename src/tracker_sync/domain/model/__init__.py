"""Domain model for volunteer attendance records."""

from __future__ import annotations

from .entities import (
    ConsentRecord,
    Entry,
    Group,
    NewConsentRecord,
    NewEntry,
    NewProfile,
    NewSession,
    Profile,
    Session,
    StoredRecord,
)
from .enums import Collection, ConsentStatus, ConsentType, EntryTag

__all__ = [
    "Collection",
    "ConsentRecord",
    "ConsentStatus",
    "ConsentType",
    "Entry",
    "EntryTag",
    "Group",
    "NewConsentRecord",
    "NewEntry",
    "NewProfile",
    "NewSession",
    "Profile",
    "Session",
    "StoredRecord",
]
