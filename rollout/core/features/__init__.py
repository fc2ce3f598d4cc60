"""
Feature flag evaluation.

Dimensions per feature:
- Groups (named predicates, registered in-process)
- Users (explicit allow-list by id)
- Percentage of users (id % 100 bucket)
- Percentage of time (gates the others; unset means always)

Usage:
    from rollout.core.features import Rollout

    rollout = Rollout(store, cache)
    rollout.define_group("fivesonly", lambda user: user.id == 5)
    rollout.activate_group("chat", "fivesonly")
    rollout.active("chat", user)
"""

from .keys import Dimension, KeyNamer, ValueKind, build_key
from .groups import ALL_GROUP, GroupPredicate, GroupRegistry
from .interfaces import (
    CacheEntry,
    CacheEntryKind,
    EvaluationResult,
    FeatureState,
    User,
)
from .cache_sync import CacheSynchronizer
from .service import Rollout, parse_percentage

from .dependencies import (
    RolloutDep,
    UserRollout,
    get_rollout,
    set_rollout,
    user_rollout,
)

from .decorators import (
    require_feature,
    feature_variant,
)

__all__ = [
    # Keys
    "Dimension",
    "KeyNamer",
    "ValueKind",
    "build_key",
    # Groups
    "ALL_GROUP",
    "GroupPredicate",
    "GroupRegistry",
    # Types
    "CacheEntry",
    "CacheEntryKind",
    "EvaluationResult",
    "FeatureState",
    "User",
    # Evaluation
    "CacheSynchronizer",
    "Rollout",
    "parse_percentage",
    # Dependencies
    "RolloutDep",
    "UserRollout",
    "get_rollout",
    "set_rollout",
    "user_rollout",
    # Decorators
    "require_feature",
    "feature_variant",
]
