"""Cached, entity-level access to the list store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, cast

from tracker_sync.common import CollectionCache
from tracker_sync.domain.errors import RecordStoreError
from tracker_sync.domain.model import Collection

from .fields import CURRENT_LAYOUT, FieldLayout

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
    from tracker_sync.domain.ports.store import ListStore, RawItem

log = getLogger(__name__)


@dataclass(slots=True)
class ListRecordRepository:
    """Maps raw list items to entities, caching each collection as a whole.

    Every write invalidates the written collection before returning, so the
    next read observes it. Items that cannot be mapped are skipped, logged and
    counted in :attr:`skipped`.
    """

    store: ListStore
    layout: FieldLayout = CURRENT_LAYOUT
    cache: CollectionCache = field(default_factory=CollectionCache)
    skipped: int = 0

    @property
    def consent_available(self) -> bool:
        return self.store.has_collection(Collection.CONSENT_RECORDS)

    async def list_groups(self) -> list[Group]:
        return await self._list(Collection.GROUPS, self.layout.to_group)

    async def list_sessions(self) -> list[Session]:
        return await self._list(Collection.SESSIONS, self.layout.to_session)

    async def list_profiles(self) -> list[Profile]:
        return await self._list(Collection.PROFILES, self.layout.to_profile)

    async def list_entries(self) -> list[Entry]:
        """Entries with their fiscal year, taken from the session date where no column holds it."""

        entries = await self._list(Collection.ENTRIES, self.layout.to_entry)
        if all(entry.fiscal_year for entry in entries):
            return entries
        fiscal_years = {session.id: session.fiscal_year for session in await self.list_sessions()}
        return [
            entry
            if entry.fiscal_year
            else replace(entry, fiscal_year=fiscal_years.get(entry.session_id))
            for entry in entries
        ]

    async def list_consent_records(self) -> list[ConsentRecord]:
        if not self.consent_available:
            return []
        return await self._list(Collection.CONSENT_RECORDS, self.layout.to_consent_record)

    async def create_session(self, session: NewSession) -> int:
        return await self._create(Collection.SESSIONS, self.layout.session_fields(session))

    async def create_profile(self, profile: NewProfile) -> int:
        return await self._create(Collection.PROFILES, self.layout.profile_fields(profile))

    async def create_entry(self, entry: NewEntry) -> int:
        return await self._create(Collection.ENTRIES, self.layout.entry_fields(entry))

    async def create_consent_record(self, record: NewConsentRecord) -> int:
        self._require_consent()
        return await self._create(
            Collection.CONSENT_RECORDS, self.layout.consent_record_fields(record)
        )

    async def update_consent_record(
        self,
        record_id: int,
        *,
        status: ConsentStatus,
        date: datetime,
    ) -> None:
        self._require_consent()
        try:
            await self.store.update_item(
                Collection.CONSENT_RECORDS,
                record_id,
                self.layout.consent_update_fields(status, date),
            )
        finally:
            self.cache.invalidate(Collection.CONSENT_RECORDS)

    def _require_consent(self) -> None:
        if not self.consent_available:
            raise RecordStoreError("Consent records list not configured")

    async def _list[TEntity](
        self,
        collection: Collection,
        parse: Callable[[RawItem], TEntity],
    ) -> list[TEntity]:
        cached = self.cache.get(collection)
        if cached is not None:
            return list(cast("list[TEntity]", cached))

        generation = self.cache.generation(collection)
        raw_items = await self.store.list_items(collection, self.layout.select(collection))
        entities: list[TEntity] = []
        for raw in raw_items:
            try:
                entities.append(parse(raw))
            except ValueError as exc:
                self.skipped += 1
                log.warning("Skipping %s item %s: %s", collection, raw.get("ID"), exc)

        self.cache.set(collection, entities, generation=generation)
        return list(entities)

    async def _create(self, collection: Collection, fields: RawItem) -> int:
        try:
            return await self.store.create_item(collection, fields)
        finally:
            # a failed write may still have landed in the store
            self.cache.invalidate(collection)
