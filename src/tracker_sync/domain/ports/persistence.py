"""Typed persistence port used by the reconciliation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from tracker_sync.domain.model import (
        ConsentRecord,
        ConsentStatus,
        Entry,
        Group,
        NewConsentRecord,
        NewEntry,
        NewProfile,
        NewSession,
        Profile,
        Session,
    )


@runtime_checkable
class AttendanceRecords(Protocol):
    """Entity-level access to the record store.

    Entries can only be listed and created here: the sync path has no way to
    update or delete an attendance fact.
    """

    @property
    def consent_available(self) -> bool: ...

    async def list_groups(self) -> list[Group]: ...

    async def list_sessions(self) -> list[Session]: ...

    async def list_profiles(self) -> list[Profile]: ...

    async def list_entries(self) -> list[Entry]: ...

    async def list_consent_records(self) -> list[ConsentRecord]: ...

    async def create_session(self, session: NewSession) -> int: ...

    async def create_profile(self, profile: NewProfile) -> int: ...

    async def create_entry(self, entry: NewEntry) -> int: ...

    async def create_consent_record(self, record: NewConsentRecord) -> int: ...

    async def update_consent_record(
        self,
        record_id: int,
        *,
        status: ConsentStatus,
        date: datetime,
    ) -> None: ...


__all__ = ["AttendanceRecords"]
