"""
FastAPI dependencies for feature flags.

Usage:
    from rollout import RolloutDep

    @router.get("/dashboard")
    async def dashboard(rollout: RolloutDep, user: CurrentUser):
        if rollout.active("new_dashboard", user):
            return new_dashboard()
        return old_dashboard()

Hosts register groups on the shared instance at startup:
    get_rollout().define_group("staff", lambda user: user.is_staff)
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException

from .service import Rollout


# ============================================================
# ROLLOUT SINGLETON
# ============================================================

_rollout: Rollout | None = None


def get_rollout() -> Rollout:
    """Get or create the process-wide Rollout from settings."""
    global _rollout
    if _rollout is None:
        from ..container import create_rollout
        _rollout = create_rollout()
    return _rollout


def set_rollout(rollout: Rollout | None) -> None:
    """Replace the shared Rollout (None resets it)."""
    global _rollout
    _rollout = rollout


# Type alias for cleaner injection
RolloutDep = Annotated[Rollout, Depends(get_rollout)]


# ============================================================
# USER-BOUND ROLLOUT
# ============================================================

class UserRollout:
    """
    Rollout bound to one user.

    Provides convenient methods that automatically use that user.
    """

    def __init__(self, rollout: Rollout, user: Any):
        self._rollout = rollout
        self._user = user

    def active(self, feature: str) -> bool:
        """Check if feature is active for the bound user."""
        if self._user is None:
            return False
        return self._rollout.active(feature, self._user)

    def evaluate(self, feature: str):
        """Evaluate feature with detailed result."""
        return self._rollout.evaluate(feature, self._user)

    def require(self, feature: str) -> None:
        """
        Require feature to be active.

        Raises 404 if inactive (feature doesn't exist for this user).
        """
        if not self.active(feature):
            raise HTTPException(status_code=404, detail="Not found")

    def require_or_403(self, feature: str) -> None:
        """
        Require feature to be active.

        Raises 403 if inactive.
        """
        if not self.active(feature):
            raise HTTPException(
                status_code=403,
                detail=f"Feature '{feature}' is not available"
            )

    @property
    def rollout(self) -> Rollout:
        return self._rollout

    @property
    def user(self) -> Any:
        return self._user


def user_rollout(get_user):
    """
    Build a dependency returning a UserRollout for the host's user dependency.

    Usage:
        UserFeatures = Annotated[UserRollout, Depends(user_rollout(get_current_user))]

        @router.get("/analytics")
        async def analytics(features: UserFeatures):
            features.require("advanced_analytics")
    """
    def dependency(
        rollout: Rollout = Depends(get_rollout),
        user=Depends(get_user),
    ) -> UserRollout:
        return UserRollout(rollout, user)

    return dependency
