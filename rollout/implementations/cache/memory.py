"""
In-memory cache backend for development and testing.
"""

from __future__ import annotations

from typing import Any
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass


@dataclass
class CacheItem:
    """Cached value with expiration."""
    value: Any
    expires_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) >= self.expires_at


class MemoryCacheBackend:
    """
    In-memory cache backend for development and testing.

    Note: Not suitable for multi-process deployments.
    Data is not persisted and not shared between processes.

    Usage:
        cache = MemoryCacheBackend()
        cache.set("key", "value", ttl=60)
        value = cache.get("key")
    """

    def __init__(self, default_ttl: int = 0):
        self.default_ttl = default_ttl
        self._store: dict[str, CacheItem] = {}

    def _ttl_seconds(self, ttl: int | timedelta | None) -> int:
        if ttl is None:
            return self.default_ttl
        if isinstance(ttl, timedelta):
            return int(ttl.total_seconds())
        return ttl

    def get(self, key: str) -> Any | None:
        item = self._store.get(key)
        if item is None:
            return None
        if item.is_expired:
            del self._store[key]
            return None
        return item.value

    def set(
        self,
        key: str,
        value: Any,
        ttl: int | timedelta | None = None,
    ) -> bool:
        ttl_seconds = self._ttl_seconds(ttl)
        expires_at = None
        if ttl_seconds:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)

        self._store[key] = CacheItem(value=value, expires_at=expires_at)
        return True

    def delete(self, key: str) -> bool:
        if key in self._store:
            del self._store[key]
            return True
        return False

    def keys(self) -> list[str]:
        """List live keys. Useful for testing."""
        return [k for k in list(self._store) if self.get(k) is not None]

    def clear(self) -> None:
        """Clear all cache entries."""
        self._store.clear()
