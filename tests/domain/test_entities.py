from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from tracker_sync.domain.model import Entry, EntryTag, NewEntry, Session


def test_entry_tags_match_case_insensitively_on_word_boundaries() -> None:
    entry = Entry(id=1, session_id=1, profile_id=2, notes="#new #CHILD helped on the day")

    assert entry.has_tag(EntryTag.NEW)
    assert entry.has_tag(EntryTag.CHILD)
    assert not entry.has_tag(EntryTag.EVENTBRITE)


def test_entry_tag_requires_word_boundary() -> None:
    entry = Entry(id=1, session_id=1, profile_id=2, notes="#Newcomer")

    assert not entry.has_tag(EntryTag.NEW)


def test_new_entry_notes_join_tags() -> None:
    entry = NewEntry(
        session_id=1,
        profile_id=2,
        fiscal_year="FY2025",
        tags=[EntryTag.NEW, EntryTag.EVENTBRITE],
    )

    assert entry.notes == "#New #Eventbrite"
    assert NewEntry(session_id=1, profile_id=2, fiscal_year="FY2025").notes is None


def test_session_fiscal_year_follows_date() -> None:
    session = Session(id=3, key="2025-03-31 Crew", date=date(2025, 3, 31))

    assert session.fiscal_year == "FY2024"
    assert session.display_name == "2025-03-31 Crew"


def test_entities_are_immutable() -> None:
    session = Session(id=3, key="2025-06-01 Sat", date=date(2025, 6, 1))

    with pytest.raises(FrozenInstanceError):
        session.external_event_id = "E1"  # type: ignore[misc]
