"""
Register all backend implementations with their registries.

Called by create_rollout() before backends are looked up by name.
"""

from rollout.core.plugins.registry import (
    store_backends,
    cache_backends,
)


def register_backends() -> None:
    """Register all backend implementations."""

    # ============ Store Backends ============

    def create_redis_store(**config):
        from rollout.implementations.store.redis import RedisStoreBackend
        return RedisStoreBackend(
            redis_url=config.get("url", "redis://localhost:6379/0"),
            socket_timeout=config.get("socket_timeout"),
            max_connections=config.get("max_connections"),
        )

    def create_memory_store(**config):
        from rollout.implementations.store.memory import MemoryStoreBackend
        return MemoryStoreBackend()

    store_backends.register("redis", create_redis_store, default=True)
    store_backends.register("memory", create_memory_store)

    # ============ Cache Backends ============

    def create_redis_cache(**config):
        from rollout.implementations.cache.redis import RedisCacheBackend
        return RedisCacheBackend(
            redis_url=config.get("url", "redis://localhost:6379/1"),
            prefix=config.get("prefix", ""),
            socket_timeout=config.get("socket_timeout"),
        )

    def create_memory_cache(**config):
        from rollout.implementations.cache.memory import MemoryCacheBackend
        return MemoryCacheBackend()

    cache_backends.register("redis", create_redis_cache, default=True)
    cache_backends.register("memory", create_memory_cache)
