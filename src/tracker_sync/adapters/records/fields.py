"""Column naming of the record store lists and raw item <-> entity mapping.

Two list configurations exist: the ``current`` Tracker site and the ``legacy``
Members site. They hold the same data under different column names, so each
is described by a :class:`FieldLayout` and the rest of the code only sees
entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any, Final

from tracker_sync.domain.model import (
    Collection,
    ConsentRecord,
    ConsentStatus,
    ConsentType,
    Entry,
    Group,
    Profile,
    Session,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tracker_sync.domain.model import NewConsentRecord, NewEntry, NewProfile, NewSession
    from tracker_sync.domain.ports.store import RawItem

_COMMON_COLUMNS: Final[tuple[str, ...]] = ("ID", "Created", "Modified")


class InvalidRecordError(ValueError):
    """A raw list item lacks a field the entity requires."""


def parse_lookup_id(value: object) -> int | None:
    """Lookup columns come back as strings, numbers or nothing at all."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def parse_date(value: object) -> date | None:
    """Read a list date column as a UTC calendar date."""

    if isinstance(value, datetime):
        parsed = parse_datetime(value)
        return parsed.astimezone(UTC).date() if parsed else None
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    parsed = parse_datetime(value)
    return parsed.astimezone(UTC).date() if parsed else None


def format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_id(raw: Mapping[str, Any]) -> int:
    item_id = parse_lookup_id(raw.get("ID"))
    if item_id is None:
        raise InvalidRecordError("missing ID")
    return item_id


@dataclass(frozen=True, slots=True)
class FieldLayout:
    name: str
    group_lookup: str
    session_lookup: str
    profile_lookup: str
    session_notes: str
    session_url: str | None = None
    financial_year: str | None = None

    def select(self, collection: Collection) -> tuple[str, ...]:
        """Columns to request when listing ``collection``."""

        match collection:
            case Collection.GROUPS:
                columns: tuple[str, ...] = ("Title", "Name", "Description", "EventbriteSeriesID")
            case Collection.SESSIONS:
                columns = (
                    "Title",
                    "Name",
                    "Date",
                    self.session_notes,
                    "EventbriteEventID",
                    self.group_lookup,
                )
                columns += tuple(c for c in (self.session_url, self.financial_year) if c)
            case Collection.PROFILES:
                columns = ("Title", "Email", "MatchName", "IsGroup")
            case Collection.ENTRIES:
                columns = (
                    self.session_lookup,
                    self.profile_lookup,
                    "Count",
                    "Checked",
                    "Hours",
                    "Notes",
                )
                if self.financial_year:
                    columns += (self.financial_year,)
            case Collection.CONSENT_RECORDS:
                columns = (self.profile_lookup, "Type", "Status", "Date")
        return _COMMON_COLUMNS + columns

    # raw -> entity

    def to_group(self, raw: Mapping[str, Any]) -> Group:
        key = _text(raw.get("Title"))
        if key is None:
            raise InvalidRecordError("group without Title")
        return Group(
            id=_require_id(raw),
            created=parse_datetime(raw.get("Created")),
            modified=parse_datetime(raw.get("Modified")),
            key=key,
            name=_text(raw.get("Name")),
            description=_text(raw.get("Description")),
            series_id=_text(raw.get("EventbriteSeriesID")),
        )

    def to_session(self, raw: Mapping[str, Any]) -> Session:
        session_date = parse_date(raw.get("Date"))
        if session_date is None:
            raise InvalidRecordError("session without Date")
        return Session(
            id=_require_id(raw),
            created=parse_datetime(raw.get("Created")),
            modified=parse_datetime(raw.get("Modified")),
            key=_text(raw.get("Title")) or session_date.isoformat(),
            date=session_date,
            name=_text(raw.get("Name")),
            group_id=parse_lookup_id(raw.get(self.group_lookup)),
            external_event_id=_text(raw.get("EventbriteEventID")),
            url=_text(raw.get(self.session_url)) if self.session_url else None,
            description=_text(raw.get(self.session_notes)),
        )

    def to_profile(self, raw: Mapping[str, Any]) -> Profile:
        name = _text(raw.get("Title"))
        if name is None:
            raise InvalidRecordError("profile without Title")
        return Profile(
            id=_require_id(raw),
            created=parse_datetime(raw.get("Created")),
            modified=parse_datetime(raw.get("Modified")),
            name=name,
            match_key=_text(raw.get("MatchName")),
            is_group=bool(raw.get("IsGroup")),
            email=_text(raw.get("Email")),
        )

    def to_entry(self, raw: Mapping[str, Any]) -> Entry:
        session_id = parse_lookup_id(raw.get(self.session_lookup))
        profile_id = parse_lookup_id(raw.get(self.profile_lookup))
        if session_id is None or profile_id is None:
            raise InvalidRecordError("entry without session or profile lookup")
        return Entry(
            id=_require_id(raw),
            created=parse_datetime(raw.get("Created")),
            modified=parse_datetime(raw.get("Modified")),
            session_id=session_id,
            profile_id=profile_id,
            count=parse_lookup_id(raw.get("Count")) or 1,
            checked_in=bool(raw.get("Checked")),
            hours=float(raw.get("Hours") or 0),
            notes=_text(raw.get("Notes")),
            fiscal_year=_text(raw.get(self.financial_year)) if self.financial_year else None,
        )

    def to_consent_record(self, raw: Mapping[str, Any]) -> ConsentRecord:
        profile_id = parse_lookup_id(raw.get(self.profile_lookup))
        if profile_id is None:
            raise InvalidRecordError("record without profile lookup")
        try:
            consent_type = ConsentType(raw.get("Type"))
            status = ConsentStatus(raw.get("Status"))
        except ValueError as exc:
            raise InvalidRecordError(str(exc)) from exc
        return ConsentRecord(
            id=_require_id(raw),
            created=parse_datetime(raw.get("Created")),
            modified=parse_datetime(raw.get("Modified")),
            profile_id=profile_id,
            type=consent_type,
            status=status,
            date=parse_datetime(raw.get("Date")),
        )

    # entity -> raw

    def session_fields(self, session: NewSession) -> RawItem:
        fields: RawItem = {"Title": session.key, "Date": session.date.isoformat()}
        if session.name:
            fields["Name"] = session.name
        if session.group_id is not None:
            fields[self.group_lookup] = str(session.group_id)
        if session.external_event_id:
            fields["EventbriteEventID"] = session.external_event_id
        if session.description:
            fields[self.session_notes] = session.description
        if self.session_url and session.url:
            fields[self.session_url] = session.url
        return fields

    def profile_fields(self, profile: NewProfile) -> RawItem:
        fields: RawItem = {"Title": profile.name, "MatchName": profile.match_key}
        if profile.is_group:
            fields["IsGroup"] = True
        if profile.email:
            fields["Email"] = profile.email
        return fields

    def entry_fields(self, entry: NewEntry) -> RawItem:
        fields: RawItem = {
            self.session_lookup: str(entry.session_id),
            self.profile_lookup: str(entry.profile_id),
            "Count": entry.count,
            "Checked": entry.checked_in,
            "Hours": entry.hours,
        }
        if entry.notes:
            fields["Notes"] = entry.notes
        if self.financial_year:
            fields[self.financial_year] = entry.fiscal_year
        return fields

    def consent_record_fields(self, record: NewConsentRecord) -> RawItem:
        return {
            self.profile_lookup: str(record.profile_id),
            "Type": record.type.value,
            "Status": record.status.value,
            "Date": format_datetime(record.date),
        }

    def consent_update_fields(self, status: ConsentStatus, when: datetime) -> RawItem:
        return {"Status": status.value, "Date": format_datetime(when)}


CURRENT_LAYOUT: Final = FieldLayout(
    name="current",
    group_lookup="GroupLookupId",
    session_lookup="SessionLookupId",
    profile_lookup="ProfileLookupId",
    session_notes="Notes",
)

LEGACY_LAYOUT: Final = FieldLayout(
    name="legacy",
    group_lookup="CrewLookupId",
    session_lookup="EventLookupId",
    profile_lookup="VolunteerLookupId",
    session_notes="Description",
    session_url="Url",
    financial_year="FinancialYearFlow",
)

FIELD_LAYOUTS: Final[dict[str, FieldLayout]] = {
    CURRENT_LAYOUT.name: CURRENT_LAYOUT,
    LEGACY_LAYOUT.name: LEGACY_LAYOUT,
}


def get_field_layout(name: str) -> FieldLayout:
    try:
        return FIELD_LAYOUTS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown field layout: {name}") from exc
