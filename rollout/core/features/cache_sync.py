"""
Cache synchronization between the durable store and the cache layer.

Write path (after every durable write):
- update(): re-read the key from the store and cache it with no expiry,
  caching a tombstone when the store has nothing.
- expire(): drop the key from the cache.

Read path, get_from_cache():
- tombstone  -> absent, store not consulted
- hit        -> cached value, store not consulted
- miss       -> read the store, cache the result, return it
- no cache   -> read the store, nothing cached

Concurrent writers race on the cache: the last update() wins.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from ..interfaces import CacheBackend, StoreBackend
from .interfaces import CacheEntry
from .keys import ValueKind

logger = structlog.get_logger()

# Cache entries never expire on their own; writes keep them current.
NO_EXPIRY = 0


class CacheSynchronizer:
    """Read-through / write-through cache in front of a durable store."""

    def __init__(self, store: StoreBackend, cache: CacheBackend | None = None):
        self.store = store
        self.cache = cache

    @property
    def enabled(self) -> bool:
        return self.cache is not None

    def read_store(self, key: str, kind: ValueKind = ValueKind.SET) -> set[str] | str | None:
        """Read the current value of key straight from the durable store."""
        if kind == ValueKind.SET:
            return self.store.set_members(key)
        return self.store.get(key)

    def update(self, key: str, kind: ValueKind = ValueKind.SET) -> CacheEntry | None:
        """
        Refresh the cached entry for key from the durable store.

        Overwrites whatever was cached, tombstones included.
        Returns the entry written, or None when no cache is configured.
        """
        if self.cache is None:
            return None

        value = self.read_store(key, kind)
        entry = CacheEntry.tombstone() if value is None else CacheEntry.hit(value)
        self.cache.set(key, entry.dump(), NO_EXPIRY)
        logger.debug("Cache updated", key=key, kind=entry.kind.value)
        return entry

    def expire(self, key: str) -> None:
        """Remove key from the cache."""
        if self.cache is None:
            return
        self.cache.delete(key)
        logger.debug("Cache expired", key=key)

    def lookup(self, key: str) -> CacheEntry:
        """
        Look key up in the cache only.

        Returns a miss when the cache has nothing usable.
        """
        if self.cache is None:
            return CacheEntry.miss()

        raw = self.cache.get(key)
        if raw is None:
            return CacheEntry.miss()

        try:
            entry = CacheEntry.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable cache entry", key=key)
            return CacheEntry.miss()

        if entry.is_miss:
            return CacheEntry.miss()
        return entry

    def get_from_cache(self, key: str, kind: ValueKind = ValueKind.SET) -> set[str] | str | None:
        """
        Read key through the cache.

        Returns set members for SET keys, a string for STRING keys, or None
        when the key is absent from the durable store.
        """
        if self.cache is None:
            return self.read_store(key, kind)

        entry = self.lookup(key)
        if entry.is_miss:
            logger.debug("Cache miss", key=key)
            entry = self.update(key, kind)

        if entry.is_tombstone:
            return None
        return _coerce(entry.value, kind)


def _coerce(value: Any, kind: ValueKind) -> set[str] | str | None:
    if value is None:
        return None
    if kind == ValueKind.SET:
        if isinstance(value, str):
            return {value}
        return {str(v) for v in value}
    return str(value)
