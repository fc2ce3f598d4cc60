"""
Pytest fixtures for testing.

Provides:
- In-memory durable store and cache
- Rollout instances with and without a cache
- A user factory
- A spy cache that records calls
"""

from dataclasses import dataclass
from typing import Any

import pytest

from rollout import Rollout, set_rollout
from rollout.implementations.cache.memory import MemoryCacheBackend
from rollout.implementations.store.memory import MemoryStoreBackend


@dataclass(frozen=True)
class FakeUser:
    """Minimal user: the evaluator only needs an integer id."""
    id: int
    is_admin: bool = False


@pytest.fixture
def make_user():
    """Factory for users by id."""
    def factory(user_id: int, **attrs: Any) -> FakeUser:
        return FakeUser(id=user_id, **attrs)
    return factory


@pytest.fixture
def store() -> MemoryStoreBackend:
    return MemoryStoreBackend()


@pytest.fixture
def cache() -> MemoryCacheBackend:
    return MemoryCacheBackend()


@pytest.fixture
def rollout(store: MemoryStoreBackend, cache: MemoryCacheBackend) -> Rollout:
    """Rollout with a cache in front of the store."""
    return Rollout(store, cache)


@pytest.fixture
def uncached_rollout(store: MemoryStoreBackend) -> Rollout:
    """Rollout reading the store directly."""
    return Rollout(store)


@pytest.fixture(params=["cached", "uncached"])
def any_rollout(request, store: MemoryStoreBackend, cache: MemoryCacheBackend) -> Rollout:
    """Run a test against both the cached and uncached paths."""
    if request.param == "cached":
        return Rollout(store, cache)
    return Rollout(store)


# ============ Spy Implementations ============


class SpyCacheBackend(MemoryCacheBackend):
    """Memory cache that records every call."""

    def __init__(self):
        super().__init__()
        self.calls: list[tuple[str, str]] = []

    def get(self, key: str) -> Any | None:
        self.calls.append(("get", key))
        return super().get(key)

    def set(self, key: str, value: Any, ttl: Any = None) -> bool:
        self.calls.append(("set", key))
        return super().set(key, value, ttl)

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        return super().delete(key)

    def calls_for(self, op: str) -> list[str]:
        return [key for name, key in self.calls if name == op]


class SpyStoreBackend(MemoryStoreBackend):
    """Memory store that counts reads."""

    def __init__(self):
        super().__init__()
        self.reads: list[tuple[str, str]] = []

    def set_members(self, key: str) -> set[str] | None:
        self.reads.append(("set_members", key))
        return super().set_members(key)

    def is_member(self, key: str, member: str) -> bool:
        self.reads.append(("is_member", key))
        return super().is_member(key, member)

    def get(self, key: str) -> str | None:
        self.reads.append(("get", key))
        return super().get(key)


@pytest.fixture
def spy_cache() -> SpyCacheBackend:
    return SpyCacheBackend()


@pytest.fixture
def spy_store() -> SpyStoreBackend:
    return SpyStoreBackend()


@pytest.fixture(autouse=True)
def reset_shared_rollout():
    """Keep the FastAPI singleton from leaking between tests."""
    yield
    set_rollout(None)
