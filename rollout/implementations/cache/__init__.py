"""Cache backend implementations."""

from rollout.implementations.cache.redis import RedisCacheBackend
from rollout.implementations.cache.memory import MemoryCacheBackend

__all__ = ["RedisCacheBackend", "MemoryCacheBackend"]
