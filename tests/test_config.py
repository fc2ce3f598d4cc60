"""
Tests for settings and the settings-driven factory.
"""

import pytest

from rollout import Rollout, RolloutSettings, UnknownBackendError, create_rollout
from rollout.core.plugins.registry import PluginRegistry
from rollout.implementations.cache.memory import MemoryCacheBackend
from rollout.implementations.cache.redis import RedisCacheBackend
from rollout.implementations.store.memory import MemoryStoreBackend
from rollout.implementations.store.redis import RedisStoreBackend


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ROLLOUT_NAMESPACE",
        "ROLLOUT_STORE_BACKEND",
        "ROLLOUT_CACHE_BACKEND",
        "ROLLOUT_RAISE_ON_GROUP_ERROR",
        "ROLLOUT_REDIS_URL",
        "ROLLOUT_CACHE_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = RolloutSettings(_env_file=None)

    assert settings.namespace is None
    assert settings.store_backend == "redis"
    assert settings.cache_backend is None
    assert settings.raise_on_group_error is False
    assert settings.deactivate_all_clears_time_percentage is False
    assert str(settings.redis.url).startswith("redis://localhost:6379")


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("ROLLOUT_NAMESPACE", "app")
    monkeypatch.setenv("ROLLOUT_STORE_BACKEND", "Memory")
    monkeypatch.setenv("ROLLOUT_CACHE_BACKEND", "memory")
    monkeypatch.setenv("ROLLOUT_RAISE_ON_GROUP_ERROR", "true")

    settings = RolloutSettings(_env_file=None)

    assert settings.namespace == "app"
    assert settings.store_backend == "memory"
    assert settings.cache_backend == "memory"
    assert settings.raise_on_group_error is True


def test_nested_redis_settings(monkeypatch):
    monkeypatch.setenv("ROLLOUT_REDIS_URL", "redis://flags:6379/3")
    monkeypatch.setenv("ROLLOUT_CACHE_PREFIX", "rc:")

    settings = RolloutSettings(_env_file=None)
    config = settings.get_backends_config()

    assert config["store"]["url"] == "redis://flags:6379/3"
    assert config["cache"]["prefix"] == "rc:"


@pytest.mark.parametrize("value", ["none", "", "off"])
def test_cache_can_be_disabled(value):
    assert RolloutSettings(_env_file=None, cache_backend=value).cache_backend is None


def test_compound_namespace_from_settings(make_user):
    settings = RolloutSettings(
        _env_file=None,
        namespace="app:prod",
        store_backend="memory",
    )
    rollout = create_rollout(settings)

    rollout.activate_user("chat", make_user(3))

    assert rollout.store.set_members("app:prod:feature:chat:users") == {"3"}
    assert rollout.active("chat", make_user(3))


def test_empty_namespace_is_none():
    assert RolloutSettings(_env_file=None, namespace="").namespace is None


# ============ Factory ============


def test_create_memory_rollout(make_user):
    settings = RolloutSettings(
        _env_file=None,
        namespace="app",
        store_backend="memory",
        cache_backend="memory",
        deactivate_all_clears_time_percentage=True,
    )

    rollout = create_rollout(settings)

    assert isinstance(rollout, Rollout)
    assert isinstance(rollout.store, MemoryStoreBackend)
    assert isinstance(rollout.cache, MemoryCacheBackend)
    assert rollout.namespace == "app"
    assert rollout.deactivate_all_clears_time_percentage is True

    rollout.activate_user("chat", make_user(3))
    assert rollout.store.keys() == ["app:feature:chat:users"]
    assert rollout.active("chat", make_user(3))


def test_create_redis_rollout_is_lazy():
    settings = RolloutSettings(
        _env_file=None,
        store_backend="redis",
        cache_backend="redis",
    )

    rollout = create_rollout(settings)

    assert isinstance(rollout.store, RedisStoreBackend)
    assert isinstance(rollout.cache, RedisCacheBackend)
    assert rollout.store._client is None


def test_create_without_cache():
    rollout = create_rollout(RolloutSettings(_env_file=None, store_backend="memory"))
    assert rollout.cache is None


def test_unknown_backend():
    with pytest.raises(UnknownBackendError):
        create_rollout(RolloutSettings(_env_file=None, store_backend="postgres"))


def test_registry_default_and_unknown_name():
    registry = PluginRegistry[dict]("test")
    registry.register("a", dict)
    registry.register("b", lambda **config: {"b": config}, default=True)

    assert registry.default == "b"
    assert registry.get() == {"b": {}}
    assert registry.get("a", config={"x": 1}) == {"x": 1}

    with pytest.raises(UnknownBackendError):
        registry.get("c")


# ============ Logging ============


def test_configure_logging_tags_namespace(capsys):
    import structlog

    from rollout.core.logs import configure_logging

    configure_logging(
        RolloutSettings(_env_file=None, namespace="app", log_format="json", log_level="debug")
    )
    try:
        structlog.get_logger().info("Feature evaluated", feature="chat")
        output = capsys.readouterr().out
    finally:
        structlog.reset_defaults()

    assert '"namespace": "app"' in output
    assert '"feature": "chat"' in output
