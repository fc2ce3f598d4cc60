"""Durable store implementations."""

from rollout.implementations.store.redis import RedisStoreBackend
from rollout.implementations.store.memory import MemoryStoreBackend

__all__ = ["RedisStoreBackend", "MemoryStoreBackend"]
