"""
Group registry.

Groups are named predicates over a user. Only group names are persisted
per feature; every process that evaluates flags must register the same
predicates, normally once at startup before serving traffic.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

GroupPredicate = Callable[[Any], bool]

ALL_GROUP = "all"


def _everyone(user: Any) -> bool:
    return True


class GroupRegistry:
    """
    Mapping from group name to predicate, owned by one Rollout.

    The built-in "all" group matches every user.

    Example:
    ```python
    groups = GroupRegistry()
    groups.define("admins", lambda user: user.is_admin)

    @groups.define("fivesonly")
    def fives_only(user):
        return user.id == 5
    ```

    Not thread-safe: mutate before evaluation starts.
    """

    def __init__(self, groups: dict[str, GroupPredicate] | None = None):
        self._groups: dict[str, GroupPredicate] = {ALL_GROUP: _everyone}
        for name, predicate in (groups or {}).items():
            self.define(name, predicate)

    def define(
        self,
        name: str,
        predicate: GroupPredicate | None = None,
    ) -> Any:
        """
        Register or overwrite the predicate for a group.

        Called without a predicate, returns a decorator.
        """
        if predicate is None:
            def decorator(func: GroupPredicate) -> GroupPredicate:
                self.define(name, func)
                return func
            return decorator

        if not callable(predicate):
            raise TypeError(f"Group predicate for '{name}' must be callable")

        name = str(name)
        if name == ALL_GROUP:
            logger.warning("Redefining the built-in 'all' group")
        self._groups[name] = predicate
        return None

    def get(self, name: str) -> GroupPredicate | None:
        """Get a group's predicate, or None if not registered."""
        return self._groups.get(str(name))

    def has(self, name: str) -> bool:
        return str(name) in self._groups

    def names(self) -> list[str]:
        """List all registered group names."""
        return sorted(self._groups)

    def __contains__(self, name: object) -> bool:
        return self.has(str(name))

    def __len__(self) -> int:
        return len(self._groups)
