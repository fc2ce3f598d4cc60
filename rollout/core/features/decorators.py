"""
Feature flag decorators for FastAPI endpoints.

Usage:
    from rollout import RolloutDep, require_feature

    @router.get("/new-dashboard")
    @require_feature("new_dashboard")
    async def new_dashboard(rollout: RolloutDep, user: CurrentUser):
        return {"dashboard": "new"}

    @router.get("/beta-feature")
    @require_feature("beta_feature", status_code=403)
    async def beta_feature(rollout: RolloutDep, user: CurrentUser):
        return {"feature": "beta"}
"""

from functools import wraps
from typing import Callable, Any

from fastapi import HTTPException
from fastapi.responses import RedirectResponse

from .dependencies import UserRollout, get_rollout
from .service import Rollout


def _is_active(feature: str, kwargs: dict[str, Any]) -> bool:
    """Evaluate feature for the endpoint's injected user and rollout."""
    for value in kwargs.values():
        if isinstance(value, UserRollout):
            return value.active(feature)

    user = kwargs.get("user")
    if user is None:
        return False

    rollout = next(
        (value for value in kwargs.values() if isinstance(value, Rollout)),
        None,
    )
    if rollout is None:
        rollout = get_rollout()

    return rollout.active(feature, user)


def require_feature(
    feature: str,
    *,
    status_code: int = 404,
    detail: str | None = None,
    redirect_url: str | None = None,
):
    """
    Decorator to require a feature to be active for the request's user.

    The endpoint must take a `user` argument or a UserRollout dependency.
    Requests without a user are treated as inactive.

    Args:
        feature: Feature name to check
        status_code: HTTP status code if inactive (default: 404)
        detail: Custom error message
        redirect_url: Redirect URL if inactive (instead of error)
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            if not _is_active(feature, kwargs):
                if redirect_url:
                    return RedirectResponse(url=redirect_url, status_code=302)

                error_detail = detail or f"Feature '{feature}' is not available"
                raise HTTPException(status_code=status_code, detail=error_detail)

            return await func(*args, **kwargs)

        return wrapper
    return decorator


def feature_variant(
    feature: str,
    *,
    enabled_handler: Callable | None = None,
    disabled_handler: Callable | None = None,
):
    """
    Decorator for A/B testing - route to different handlers.

    Handlers receive the same arguments as the decorated endpoint.

    Usage:
        async def new_checkout(rollout: RolloutDep, user: CurrentUser):
            return {"version": "new"}

        @router.post("/checkout")
        @feature_variant("new_checkout", enabled_handler=new_checkout)
        async def checkout(rollout: RolloutDep, user: CurrentUser):
            return {"version": "old"}
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            enabled = _is_active(feature, kwargs)

            if enabled and enabled_handler:
                return await enabled_handler(*args, **kwargs)
            elif not enabled and disabled_handler:
                return await disabled_handler(*args, **kwargs)
            else:
                return await func(*args, **kwargs)

        return wrapper
    return decorator
