"""
Feature flag types shared by the evaluator and the cache synchronizer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict


class User(Protocol):
    """Anything with a stable non-negative integer id."""

    id: int


class CacheEntryKind(str, Enum):
    HIT = "hit"
    TOMBSTONE = "tombstone"
    MISS = "miss"


class CacheEntry(BaseModel):
    """
    Tagged cache entry.

    A tombstone records that the durable store confirmed the key absent, so
    readers can skip the store. A miss means the cache knows nothing and the
    store must be asked. Misses are never written to the cache.

    Entries are cached as their JSON dump, e.g.
    `{"kind": "hit", "value": ["admins", "all"]}`.
    """

    model_config = ConfigDict(frozen=True)

    kind: CacheEntryKind
    value: list[str] | str | None = None

    @classmethod
    def hit(cls, value: set[str] | list[str] | str) -> "CacheEntry":
        if isinstance(value, (set, frozenset, list, tuple)):
            value = sorted(str(v) for v in value)
        return cls(kind=CacheEntryKind.HIT, value=value)

    @classmethod
    def tombstone(cls) -> "CacheEntry":
        return cls(kind=CacheEntryKind.TOMBSTONE)

    @classmethod
    def miss(cls) -> "CacheEntry":
        return cls(kind=CacheEntryKind.MISS)

    @property
    def is_hit(self) -> bool:
        return self.kind == CacheEntryKind.HIT

    @property
    def is_tombstone(self) -> bool:
        return self.kind == CacheEntryKind.TOMBSTONE

    @property
    def is_miss(self) -> bool:
        return self.kind == CacheEntryKind.MISS

    def dump(self) -> dict[str, Any]:
        """JSON-safe form written to the cache backend."""
        return self.model_dump(mode="json")


@dataclass
class EvaluationResult:
    """
    Result of feature flag evaluation.

    Includes the decision and the dimension that decided it.
    """
    enabled: bool
    reason: str
    feature: str
    user_id: int | None = None

    @classmethod
    def yes(cls, feature: str, reason: str, user_id: int | None = None) -> "EvaluationResult":
        return cls(enabled=True, reason=reason, feature=feature, user_id=user_id)

    @classmethod
    def no(cls, feature: str, reason: str, user_id: int | None = None) -> "EvaluationResult":
        return cls(enabled=False, reason=reason, feature=feature, user_id=user_id)

    def __bool__(self) -> bool:
        return self.enabled


@dataclass
class FeatureState:
    """Snapshot of every activation dimension of a feature."""
    name: str
    groups: list[str] = field(default_factory=list)
    users: list[str] = field(default_factory=list)
    percentage: int | None = None
    percentage_of_time: int | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.groups or self.users or self.percentage is not None)
