"""
Redis cache backend implementation.
"""

from __future__ import annotations

import json
from typing import Any
from datetime import timedelta

import redis

from rollout.core.errors import CacheUnavailableError


class RedisCacheBackend:
    """
    Redis cache backend implementation.

    Values are stored as JSON. Connection and timeout errors are raised as
    CacheUnavailableError so they are never mistaken for a miss.

    Usage:
        cache = RedisCacheBackend(redis_url="redis://localhost:6379/1")
        cache.set("key", {"data": "value"}, ttl=0)
        value = cache.get("key")
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/1",
        prefix: str = "",
        default_ttl: int = 0,
        socket_timeout: float | None = None,
        client: redis.Redis | None = None,
    ):
        self.redis_url = redis_url
        self.prefix = prefix
        self.default_ttl = default_ttl
        self.socket_timeout = socket_timeout
        self._client = client

    def connect(self) -> None:
        """Connect to Redis."""
        if self._client is None:
            self._client = redis.Redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=self.socket_timeout,
            )

    def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            self._client.close()
            self._client = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self.connect()
        return self._client

    def _key(self, key: str) -> str:
        """Prepend prefix to key."""
        return f"{self.prefix}{key}" if self.prefix else key

    def _ttl_seconds(self, ttl: int | timedelta | None) -> int:
        """Convert TTL to seconds."""
        if ttl is None:
            return self.default_ttl
        if isinstance(ttl, timedelta):
            return int(ttl.total_seconds())
        return ttl

    def _serialize(self, value: Any) -> str:
        """Serialize value to JSON string."""
        return json.dumps(value)

    def _deserialize(self, value: str | bytes | None) -> Any:
        """Deserialize JSON string to value."""
        if value is None:
            return None
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value

    def get(self, key: str) -> Any | None:
        """Get value by key."""
        try:
            value = self.client.get(self._key(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError("cache get", key, e) from e
        return self._deserialize(value)

    def set(
        self,
        key: str,
        value: Any,
        ttl: int | timedelta | None = None,
    ) -> bool:
        """Set value. A ttl of 0 stores the key without expiry."""
        ttl_seconds = self._ttl_seconds(ttl)
        serialized = self._serialize(value)
        try:
            result = self.client.set(
                self._key(key),
                serialized,
                ex=ttl_seconds or None,
            )
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError("cache set", key, e) from e
        return result is True

    def delete(self, key: str) -> bool:
        """Delete key."""
        try:
            result = self.client.delete(self._key(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError("cache delete", key, e) from e
        return result > 0
