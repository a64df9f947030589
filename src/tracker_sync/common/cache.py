"""Process-wide snapshot cache for whole record collections.

Entries never expire on their own. Writers invalidate the key of the collection
they touched before returning, so the next reader re-fetches the collection.

Every invalidation bumps the key's generation. A reader that fetched a snapshot
across an invalidation passes the generation it started from to :meth:`set`,
and the out-of-date snapshot is dropped instead of being cached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger

log = getLogger(__name__)


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    invalidations: int = 0
    stale_writes: int = 0


@dataclass(slots=True)
class CollectionCache:
    """Keyed snapshots with explicit, collection-wide invalidation."""

    _entries: dict[str, object] = field(default_factory=dict[str, object])
    _generations: dict[str, int] = field(default_factory=dict[str, int])
    _stats: CacheStats = field(default_factory=CacheStats)

    def get(self, key: str) -> object | None:
        """Return the cached snapshot for ``key`` or ``None`` on a miss."""

        if key in self._entries:
            self._stats.hits += 1
            log.debug("Cache hit: %s", key)
            return self._entries[key]
        self._stats.misses += 1
        log.debug("Cache miss: %s", key)
        return None

    def generation(self, key: str) -> int:
        return self._generations.get(key, 0)

    def set(self, key: str, value: object, *, generation: int | None = None) -> bool:
        """Store ``value`` unless ``key`` was invalidated since ``generation``."""

        if generation is not None and generation != self.generation(key):
            self._stats.stale_writes += 1
            log.debug("Cache write dropped, %s changed while it was read", key)
            return False
        self._entries[key] = value
        return True

    def invalidate(self, key: str) -> None:
        self._generations[key] = self.generation(key) + 1
        if self._entries.pop(key, None) is not None:
            log.debug("Cache invalidated: %s", key)
        self._stats.invalidations += 1

    def clear(self) -> None:
        self._entries.clear()
        log.debug("Cache cleared")

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._stats.hits,
            misses=self._stats.misses,
            invalidations=self._stats.invalidations,
            stale_writes=self._stats.stale_writes,
        )
