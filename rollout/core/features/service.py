"""
Rollout - Main evaluation logic.

A feature is active for a user when any of these match:
- Group membership (named predicates registered in-process)
- Explicit user allow-list
- Percentage of users (user.id % 100 < percentage)

and the feature is inside its percentage-of-time window, which passes when
unset. That lets dimensions combine, e.g. "90% of users, 10% of the time".
"""

from __future__ import annotations

import math
import re
import time
from datetime import datetime
from typing import Any, Callable

import structlog

from ..errors import GroupPredicateError, InvalidPercentageError
from ..interfaces import CacheBackend, StoreBackend
from .cache_sync import CacheSynchronizer
from .groups import GroupPredicate, GroupRegistry
from .interfaces import EvaluationResult, FeatureState
from .keys import KeyNamer, ValueKind

logger = structlog.get_logger()

# ASCII digits with an optional leading minus, nothing else.
_INTEGER = re.compile(r"-?[0-9]+")


def _parse_integer_text(value: str | bytes) -> int | None:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if _INTEGER.fullmatch(value) is None:
        return None
    return int(value)


def parse_percentage(value: Any, key: str | None = None) -> int:
    """
    Strictly parse a percentage.

    Accepts ints, integral floats and ASCII decimal strings such as "20"
    or "-1". Anything else, booleans and strings like "+20", " 20 " or
    "2_0" included, raises InvalidPercentageError. The range is not
    checked: values outside 0-100 follow plain `<` comparison.
    """
    if isinstance(value, bool):
        raise InvalidPercentageError(value, key)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InvalidPercentageError(value, key)
    if isinstance(value, (str, bytes)):
        parsed = _parse_integer_text(value)
        if parsed is None:
            raise InvalidPercentageError(value, key)
        return parsed
    raise InvalidPercentageError(value, key)


def user_id_of(user: Any) -> int:
    """
    Get the integer id of a user object (or of a bare id).

    Raises:
        TypeError: If the id is a bool, a non-integral float or not an integer
    """
    user_id = getattr(user, "id", user)
    if isinstance(user_id, bool):
        raise TypeError(f"User id must be an integer, got {user_id!r}")
    if isinstance(user_id, int):
        return user_id
    if isinstance(user_id, float) and user_id.is_integer():
        return int(user_id)
    if isinstance(user_id, (str, bytes)):
        parsed = _parse_integer_text(user_id)
        if parsed is not None:
            return parsed
    raise TypeError(f"User id must be an integer, got {user_id!r}")


def epoch_seconds(at_time: float | int | datetime) -> int:
    """Whole seconds since the Unix epoch. Naive datetimes are local time."""
    if isinstance(at_time, datetime):
        at_time = at_time.timestamp()
    return math.floor(at_time)


class Rollout:
    """
    Feature flag evaluator.

    Every write goes to the durable store first, then the cache entry for
    that key is refreshed (or dropped). Reads go through the cache when one
    is configured.

    Usage:
        rollout = Rollout(store, cache)
        rollout.define_group("admins", lambda user: user.is_admin)
        rollout.activate_group("chat", "admins")
        rollout.activate_percentage("chat", 20)

        if rollout.active("chat", current_user):
            ...
    """

    def __init__(
        self,
        store: StoreBackend,
        cache: CacheBackend | None = None,
        *,
        namespace: str | None = None,
        groups: GroupRegistry | None = None,
        raise_on_group_error: bool = False,
        deactivate_all_clears_time_percentage: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.cache = cache
        self.groups = groups if groups is not None else GroupRegistry()
        self.raise_on_group_error = raise_on_group_error
        self.deactivate_all_clears_time_percentage = deactivate_all_clears_time_percentage
        self.clock = clock
        self.keys = KeyNamer(namespace)
        self._sync = CacheSynchronizer(store, cache)

    @property
    def namespace(self) -> str | None:
        return self.keys.namespace

    @namespace.setter
    def namespace(self, value: str | None) -> None:
        self.keys = KeyNamer(value)

    @property
    def sync(self) -> CacheSynchronizer:
        return self._sync

    # ============================================================
    # GROUPS
    # ============================================================

    def define_group(self, name: str, predicate: GroupPredicate | None = None) -> Any:
        """
        Register a group predicate.

        Usable directly or as a decorator:
            rollout.define_group("fivesonly", lambda user: user.id == 5)

            @rollout.define_group("staff")
            def staff(user):
                return user.is_staff
        """
        return self.groups.define(name, predicate)

    def group(self, name: str) -> Callable[[GroupPredicate], GroupPredicate]:
        """
        Decorator form of define_group.

            @rollout.group("admins")
            def admins(user):
                return user.is_admin
        """
        return self.groups.define(name)

    def activate_group(self, feature: str, group: str) -> None:
        """Activate a feature for every user in a group."""
        key = self.keys.groups(feature)
        self.store.set_add(key, str(group))
        self._sync.update(key, ValueKind.SET)
        logger.info("Feature group activated", feature=str(feature), group=str(group))

    def deactivate_group(self, feature: str, group: str) -> None:
        """Deactivate a feature for a group. Other groups stay active."""
        key = self.keys.groups(feature)
        self.store.set_remove(key, str(group))
        self._sync.update(key, ValueKind.SET)
        logger.info("Feature group deactivated", feature=str(feature), group=str(group))

    # ============================================================
    # USERS
    # ============================================================

    def activate_user(self, feature: str, user: Any) -> None:
        """Activate a feature for one user (object with .id, or an id)."""
        key = self.keys.users(feature)
        user_id = user_id_of(user)
        self.store.set_add(key, str(user_id))
        self._sync.update(key, ValueKind.SET)
        logger.info("Feature user activated", feature=str(feature), user_id=user_id)

    def deactivate_user(self, feature: str, user: Any) -> None:
        """Deactivate a feature for one user."""
        key = self.keys.users(feature)
        user_id = user_id_of(user)
        self.store.set_remove(key, str(user_id))
        self._sync.update(key, ValueKind.SET)
        logger.info("Feature user deactivated", feature=str(feature), user_id=user_id)

    # ============================================================
    # PERCENTAGES
    # ============================================================

    def activate_percentage(self, feature: str, percentage: int) -> None:
        """
        Activate a feature for a percentage of users.

        Users with `id % 100 < percentage` are active, so raising the
        percentage only ever adds users.

        Raises:
            InvalidPercentageError: If percentage is not an integer
        """
        key = self.keys.percentage(feature)
        value = parse_percentage(percentage)
        self.store.set(key, str(value))
        self._sync.update(key, ValueKind.STRING)
        logger.info("Feature percentage activated", feature=str(feature), percentage=value)

    def deactivate_percentage(self, feature: str) -> None:
        """Remove the percentage rollout of a feature."""
        key = self.keys.percentage(feature)
        self.store.delete(key)
        self._sync.expire(key)
        logger.info("Feature percentage deactivated", feature=str(feature))

    def activate_percentage_of_time(self, feature: str, percentage: int) -> None:
        """
        Limit a feature to a percentage of the time.

        Active when `floor(now) % 100 < percentage`, on top of the other
        dimensions.

        Raises:
            InvalidPercentageError: If percentage is not an integer
        """
        key = self.keys.percentage_of_time(feature)
        value = parse_percentage(percentage)
        self.store.set(key, str(value))
        self._sync.update(key, ValueKind.STRING)
        logger.info("Feature time percentage activated", feature=str(feature), percentage=value)

    def deactivate_percentage_of_time(self, feature: str) -> None:
        """Remove the time window of a feature."""
        key = self.keys.percentage_of_time(feature)
        self.store.delete(key)
        self._sync.expire(key)
        logger.info("Feature time percentage deactivated", feature=str(feature))

    # ============================================================
    # BULK
    # ============================================================

    def deactivate_all(self, feature: str) -> None:
        """
        Clear the groups, users and percentage of a feature.

        The percentage-of-time window is kept unless
        deactivate_all_clears_time_percentage is set.
        """
        keys = [
            self.keys.groups(feature),
            self.keys.users(feature),
            self.keys.percentage(feature),
        ]
        if self.deactivate_all_clears_time_percentage:
            keys.append(self.keys.percentage_of_time(feature))

        for key in keys:
            self.store.delete(key)
        for key in keys:
            self._sync.expire(key)

        logger.info("Feature deactivated", feature=str(feature))

    # ============================================================
    # VALUES
    # ============================================================

    def get_value(self, name: str) -> str | None:
        """Get an auxiliary stored value, or None if unset."""
        return self._sync.get_from_cache(self.keys.value(name), ValueKind.STRING)

    def store_value(self, name: str, value: str) -> None:
        """Store an auxiliary value alongside feature state."""
        key = self.keys.value(name)
        self.store.set(key, str(value))
        self._sync.update(key, ValueKind.STRING)

    # ============================================================
    # EVALUATION
    # ============================================================

    def active(
        self,
        feature: str,
        user: Any,
        at_time: float | int | datetime | None = None,
    ) -> bool:
        """
        Check if a feature is active for a user.

        Args:
            feature: Feature name
            user: Object with an integer `id`
            at_time: Seconds since the epoch or datetime (default: now)

        Raises:
            InvalidPercentageError: If a stored percentage is malformed
            GroupPredicateError: If a group fails and raise_on_group_error is set
        """
        return self.evaluate(feature, user, at_time).enabled

    def evaluate(
        self,
        feature: str,
        user: Any,
        at_time: float | int | datetime | None = None,
    ) -> EvaluationResult:
        """
        Evaluate a feature with detailed result.

        Returns EvaluationResult with the deciding dimension as reason.
        """
        feature = str(feature)
        user_id = user_id_of(user)

        reason = self._matching_group(feature, user)
        if reason is None and self._user_active(feature, user_id):
            reason = "user"
        if reason is None and self._user_within_active_percentage(feature, user_id):
            reason = "percentage"

        if reason is None:
            result = EvaluationResult.no(feature, "No matching dimension", user_id)
        elif not self._within_active_percentage_of_time(feature, at_time):
            result = EvaluationResult.no(feature, "Outside percentage of time", user_id)
        else:
            result = EvaluationResult.yes(feature, reason, user_id)

        logger.debug(
            "Feature evaluated",
            feature=feature,
            user_id=user_id,
            enabled=result.enabled,
            reason=result.reason,
        )
        return result

    def info(self, feature: str) -> FeatureState:
        """
        Read every activation dimension of a feature.

        Raises:
            InvalidPercentageError: If a stored percentage is malformed
        """
        feature = str(feature)
        groups = self._sync.get_from_cache(self.keys.groups(feature), ValueKind.SET) or set()
        users = self._sync.get_from_cache(self.keys.users(feature), ValueKind.SET) or set()
        return FeatureState(
            name=feature,
            groups=sorted(groups),
            users=sorted(users, key=_id_sort_key),
            percentage=self._read_percentage(self.keys.percentage(feature)),
            percentage_of_time=self._read_percentage(self.keys.percentage_of_time(feature)),
        )

    # ============================================================
    # DIMENSION CHECKS
    # ============================================================

    def _matching_group(self, feature: str, user: Any) -> str | None:
        """Return "group:<name>" for the first active group matching user."""
        members = self._sync.get_from_cache(self.keys.groups(feature), ValueKind.SET)
        if not members:
            return None

        for group in sorted(members):
            predicate = self.groups.get(group)
            if predicate is None:
                continue
            try:
                matched = predicate(user)
            except Exception as e:
                if self.raise_on_group_error:
                    raise GroupPredicateError(group, feature, e) from e
                logger.warning(
                    "Group predicate failed, treating group as inactive",
                    feature=feature,
                    group=group,
                    error=repr(e),
                )
                continue
            if matched:
                return f"group:{group}"
        return None

    def _user_active(self, feature: str, user_id: int) -> bool:
        key = self.keys.users(feature)
        if not self._sync.enabled:
            return self.store.is_member(key, str(user_id))
        members = self._sync.get_from_cache(key, ValueKind.SET)
        if not members:
            return False
        return str(user_id) in members

    def _user_within_active_percentage(self, feature: str, user_id: int) -> bool:
        percentage = self._read_percentage(self.keys.percentage(feature))
        if percentage is None:
            return False
        return user_id % 100 < percentage

    def _within_active_percentage_of_time(
        self,
        feature: str,
        at_time: float | int | datetime | None,
    ) -> bool:
        percentage = self._read_percentage(self.keys.percentage_of_time(feature))
        if percentage is None:
            return True
        if at_time is None:
            at_time = self.clock()
        return epoch_seconds(at_time) % 100 < percentage

    def _read_percentage(self, key: str) -> int | None:
        raw = self._sync.get_from_cache(key, ValueKind.STRING)
        if raw is None:
            return None
        return parse_percentage(raw, key)


def _id_sort_key(value: str) -> tuple[int, int | str]:
    try:
        return (0, int(value))
    except ValueError:
        return (1, value)
