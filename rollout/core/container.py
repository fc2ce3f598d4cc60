"""
Rollout factory.
Builds a configured Rollout from settings via the backend registries.
"""

from __future__ import annotations

from .config import RolloutSettings, get_settings
from .features.groups import GroupRegistry
from .features.service import Rollout
from .plugins.registry import cache_backends, store_backends

_registered = False


def _ensure_backends_registered() -> None:
    global _registered
    if not _registered:
        from rollout.implementations.register import register_backends
        register_backends()
        _registered = True


def create_rollout(
    settings: RolloutSettings | None = None,
    *,
    groups: GroupRegistry | None = None,
) -> Rollout:
    """
    Create a Rollout wired to the configured store and cache.

    Example:
    ```python
    from rollout import create_rollout

    rollout = create_rollout()
    rollout.define_group("staff", lambda user: user.is_staff)
    ```
    """
    settings = settings or get_settings()
    _ensure_backends_registered()

    config = settings.get_backends_config()
    backends = config["backends"]

    store = store_backends.get(backends["store"], config=config["store"])
    cache = None
    if backends["cache"] is not None:
        cache = cache_backends.get(backends["cache"], config=config["cache"])

    return Rollout(
        store,
        cache,
        namespace=settings.namespace,
        groups=groups,
        raise_on_group_error=settings.raise_on_group_error,
        deactivate_all_clears_time_percentage=settings.deactivate_all_clears_time_percentage,
    )
