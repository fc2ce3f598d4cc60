"""
Feature flags backed by a durable store with an optional read-through cache.

Level 1 - Direct construction:
    from rollout import Rollout
    from rollout.implementations import RedisStoreBackend, RedisCacheBackend

    rollout = Rollout(RedisStoreBackend(), RedisCacheBackend())
    rollout.activate_user("chat", user)
    rollout.active("chat", user)

Level 2 - From settings (ROLLOUT_* environment variables):
    from rollout import create_rollout

    rollout = create_rollout()

Level 3 - FastAPI:
    from rollout import RolloutDep, require_feature

    @router.get("/beta")
    @require_feature("beta")
    async def beta(rollout: RolloutDep, user: CurrentUser):
        ...
"""

from rollout.core.config import RolloutSettings, get_settings
from rollout.core.container import create_rollout
from rollout.core.errors import (
    RolloutError,
    BackendUnavailableError,
    StoreUnavailableError,
    CacheUnavailableError,
    InvalidPercentageError,
    GroupPredicateError,
    UnknownBackendError,
)
from rollout.core.features import (
    Dimension,
    EvaluationResult,
    FeatureState,
    GroupRegistry,
    Rollout,
    RolloutDep,
    UserRollout,
    feature_variant,
    get_rollout,
    require_feature,
    set_rollout,
    user_rollout,
)

__all__ = [
    "RolloutSettings",
    "get_settings",
    "create_rollout",
    # Errors
    "RolloutError",
    "BackendUnavailableError",
    "StoreUnavailableError",
    "CacheUnavailableError",
    "InvalidPercentageError",
    "GroupPredicateError",
    "UnknownBackendError",
    # Features
    "Dimension",
    "EvaluationResult",
    "FeatureState",
    "GroupRegistry",
    "Rollout",
    "RolloutDep",
    "UserRollout",
    "feature_variant",
    "get_rollout",
    "require_feature",
    "set_rollout",
    "user_rollout",
]
