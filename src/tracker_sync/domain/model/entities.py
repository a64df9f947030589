"""Entities persisted in the list-based record store.

Ids are the store's auto-incrementing item ids. Lookups between collections are
plain integer ids; nothing here holds a reference to another entity object.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tracker_sync.domain.financial_year import financial_year

from .enums import ConsentStatus, ConsentType, EntryTag

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredRecord:
    id: int
    created: datetime | None = None
    modified: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Group(StoredRecord):
    """A recurring volunteer crew, maintained by operators."""

    key: str
    name: str | None = None
    description: str | None = None
    series_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.key


@dataclass(frozen=True, slots=True, kw_only=True)
class Session(StoredRecord):
    """One scheduled event."""

    key: str
    date: date
    name: str | None = None
    group_id: int | None = None
    external_event_id: str | None = None
    url: str | None = None
    description: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.key

    @property
    def fiscal_year(self) -> str:
        return financial_year(self.date)


@dataclass(frozen=True, slots=True, kw_only=True)
class Profile(StoredRecord):
    """A volunteer identity."""

    name: str
    match_key: str | None = None
    is_group: bool = False
    email: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Entry(StoredRecord):
    """One attendance fact for a (session, profile) pair."""

    session_id: int
    profile_id: int
    count: int = 1
    checked_in: bool = False
    hours: float = 0.0
    notes: str | None = None
    fiscal_year: str | None = None

    def has_tag(self, tag: EntryTag) -> bool:
        if not self.notes:
            return False
        return re.search(rf"{re.escape(tag.value)}\b", self.notes, re.IGNORECASE) is not None


@dataclass(frozen=True, slots=True, kw_only=True)
class ConsentRecord(StoredRecord):
    """Latest consent answer of one profile for one consent type."""

    profile_id: int
    type: ConsentType
    status: ConsentStatus
    date: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NewSession:
    key: str
    date: date
    name: str | None = None
    group_id: int | None = None
    external_event_id: str | None = None
    url: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NewProfile:
    name: str
    match_key: str
    is_group: bool = False
    email: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NewEntry:
    session_id: int
    profile_id: int
    fiscal_year: str
    count: int = 1
    checked_in: bool = False
    hours: float = 0.0
    tags: list[EntryTag] = field(default_factory=list["EntryTag"])

    @property
    def notes(self) -> str | None:
        return " ".join(tag.value for tag in self.tags) or None


@dataclass(frozen=True, slots=True, kw_only=True)
class NewConsentRecord:
    profile_id: int
    type: ConsentType
    status: ConsentStatus
    date: datetime
