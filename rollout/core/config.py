"""
Rollout configuration using Pydantic Settings.
"""

from typing import Any
from functools import lru_cache
from pydantic import Field, field_validator, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Durable store (Redis) configuration."""

    model_config = SettingsConfigDict(env_prefix="ROLLOUT_REDIS_")

    url: RedisDsn = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for flag state",
    )
    socket_timeout: float = Field(default=5.0, gt=0)
    max_connections: int = Field(default=10, ge=1)


class CacheSettings(BaseSettings):
    """Cache layer configuration."""

    model_config = SettingsConfigDict(env_prefix="ROLLOUT_CACHE_")

    url: RedisDsn = Field(
        default="redis://localhost:6379/1",
        description="Redis connection URL for the cache",
    )
    prefix: str = Field(default="", description="Prepended to every cache key")
    socket_timeout: float = Field(default=1.0, gt=0)


class RolloutSettings(BaseSettings):
    """Main rollout settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROLLOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    namespace: str | None = Field(
        default=None,
        description="Optional prefix for every storage key",
    )

    # Backends
    store_backend: str = Field(default="redis", description="redis, memory")
    cache_backend: str | None = Field(
        default=None,
        description="None disables caching; otherwise redis, memory",
    )

    # Evaluation policy
    raise_on_group_error: bool = Field(
        default=False,
        description="Raise GroupPredicateError instead of treating the group as inactive",
    )
    deactivate_all_clears_time_percentage: bool = Field(
        default=False,
        description="Also clear percentage-of-time in deactivate_all",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text", description="json or text")

    # Nested settings
    redis: RedisSettings = Field(default_factory=RedisSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str | None) -> str | None:
        # May itself contain ':' (e.g. "app:prod"); keys stay "<namespace>:feature:..."
        return v or None

    @field_validator("store_backend")
    @classmethod
    def normalize_store_backend(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("cache_backend")
    @classmethod
    def normalize_cache_backend(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().lower()
        if v in {"", "none", "off"}:
            return None
        return v

    def get_backends_config(self) -> dict[str, Any]:
        """Get backend factory configuration."""
        return {
            "backends": {
                "store": self.store_backend,
                "cache": self.cache_backend,
            },
            "store": {
                "url": str(self.redis.url),
                "socket_timeout": self.redis.socket_timeout,
                "max_connections": self.redis.max_connections,
            },
            "cache": {
                "url": str(self.cache.url),
                "prefix": self.cache.prefix,
                "socket_timeout": self.cache.socket_timeout,
            },
        }


@lru_cache
def get_settings() -> RolloutSettings:
    """Get cached settings instance."""
    return RolloutSettings()
