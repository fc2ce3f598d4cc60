"""
Cache backend protocol.
Implementations: RedisCacheBackend, MemoryCacheBackend
"""
from __future__ import annotations

from typing import Protocol, Any
from datetime import timedelta


class CacheBackend(Protocol):
    """
    Protocol for the read-through cache in front of the durable store.

    `get` returns None on a miss. Rollout never stores None itself, so a
    None result always means "ask the durable store".

    Example implementations:
    - RedisCacheBackend: Redis-based caching
    - MemoryCacheBackend: In-process dict (for testing/dev)
    """

    def get(self, key: str) -> Any | None:
        """Get value by key. Returns None if not found."""
        ...

    def set(
        self,
        key: str,
        value: Any,
        ttl: int | timedelta | None = None,
    ) -> bool:
        """Set value. A ttl of 0 or None means the entry never expires."""
        ...

    def delete(self, key: str) -> bool:
        """Delete key. Returns True if deleted."""
        ...
