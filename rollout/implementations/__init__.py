"""
Backend implementations for core interfaces.
"""

from rollout.implementations.cache.redis import RedisCacheBackend
from rollout.implementations.cache.memory import MemoryCacheBackend
from rollout.implementations.store.redis import RedisStoreBackend
from rollout.implementations.store.memory import MemoryStoreBackend

__all__ = [
    "RedisCacheBackend",
    "MemoryCacheBackend",
    "RedisStoreBackend",
    "MemoryStoreBackend",
]
