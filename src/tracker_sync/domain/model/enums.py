"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Collection(StrEnum):
    """Record collections held by the list store."""

    GROUPS = "groups"
    SESSIONS = "sessions"
    PROFILES = "profiles"
    ENTRIES = "entries"
    CONSENT_RECORDS = "consent_records"


class ConsentType(StrEnum):
    PRIVACY = "Privacy Consent"
    PHOTO = "Photo Consent"


class ConsentStatus(StrEnum):
    INVITED = "Invited"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"


class EntryTag(StrEnum):
    """Hash-tag markers carried in entry notes."""

    NEW = "#New"
    CHILD = "#Child"
    EVENTBRITE = "#Eventbrite"
