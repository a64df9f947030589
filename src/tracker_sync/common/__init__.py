from __future__ import annotations

from .cache import CacheStats, CollectionCache

__all__ = ["CacheStats", "CollectionCache"]
