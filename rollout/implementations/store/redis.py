"""
Redis durable store implementation.
"""

from __future__ import annotations

import redis

from rollout.core.errors import StoreUnavailableError


class RedisStoreBackend:
    """
    Redis-backed flag state.

    Sets map to SADD/SREM/SMEMBERS/SISMEMBER, strings to GET/SET, and
    delete to DEL. Redis drops a set when its last member is removed, so an
    empty SMEMBERS reply is reported as absent.

    Usage:
        store = RedisStoreBackend(redis_url="redis://localhost:6379/0")
        store.set_add("feature:chat:groups", "all")
        store.set_members("feature:chat:groups")  # {"all"}
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        socket_timeout: float | None = None,
        max_connections: int | None = None,
        client: redis.Redis | None = None,
    ):
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self.max_connections = max_connections
        self._client = client

    def connect(self) -> None:
        """Connect to Redis."""
        if self._client is None:
            self._client = redis.Redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=self.socket_timeout,
                max_connections=self.max_connections,
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

    def set_add(self, key: str, member: str) -> None:
        try:
            self.client.sadd(key, str(member))
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store sadd", key, e) from e

    def set_remove(self, key: str, member: str) -> None:
        try:
            self.client.srem(key, str(member))
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store srem", key, e) from e

    def set_members(self, key: str) -> set[str] | None:
        try:
            members = self.client.smembers(key)
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store smembers", key, e) from e
        if not members:
            return None
        return {_decode(m) for m in members}

    def is_member(self, key: str, member: str) -> bool:
        try:
            return bool(self.client.sismember(key, str(member)))
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store sismember", key, e) from e

    def get(self, key: str) -> str | None:
        try:
            value = self.client.get(key)
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store get", key, e) from e
        return None if value is None else _decode(value)

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(key, str(value))
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store set", key, e) from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError("store delete", key, e) from e


def _decode(value: str | bytes) -> str:
    # Clients built without decode_responses hand back bytes
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
