"""Port for the raw list-based record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from tracker_sync.domain.model import Collection

# Flat list item: ``ID``, ``Created``, ``Modified`` plus the list's own columns.
type RawItem = dict[str, Any]


@runtime_checkable
class ListStore(Protocol):
    """Typed collections of flat items with auto-incrementing integer ids."""

    def has_collection(self, collection: Collection) -> bool: ...

    async def list_items(
        self,
        collection: Collection,
        select: Sequence[str] | None = None,
    ) -> list[RawItem]: ...

    async def create_item(self, collection: Collection, fields: Mapping[str, Any]) -> int: ...

    async def update_item(
        self,
        collection: Collection,
        item_id: int,
        fields: Mapping[str, Any],
    ) -> None: ...

    async def delete_item(self, collection: Collection, item_id: int) -> None: ...


__all__ = ["ListStore", "RawItem"]
