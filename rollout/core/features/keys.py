"""
Storage key naming.

Keys address both the durable store and the cache, so their format is a
wire contract: `[namespace:]feature:<name>:<dimension>`.
"""

from dataclasses import dataclass
from enum import Enum


DELIMITER = ":"


class ValueKind(str, Enum):
    """How a dimension is stored."""
    SET = "set"
    STRING = "string"


class Dimension(str, Enum):
    """Per-feature storage dimensions."""
    GROUPS = "groups"
    USERS = "users"
    PERCENTAGE = "percentage"
    PERCENTAGE_OF_TIME = "time_percentage"
    VALUE = "value"

    @property
    def kind(self) -> ValueKind:
        if self in (Dimension.GROUPS, Dimension.USERS):
            return ValueKind.SET
        return ValueKind.STRING


def build_key(feature: str, dimension: Dimension, namespace: str | None = None) -> str:
    """
    Build the storage key for one dimension of a feature.

    Examples:
        build_key("chat", Dimension.GROUPS)
        # Returns: "feature:chat:groups"

        build_key("chat", Dimension.PERCENTAGE_OF_TIME, namespace="app")
        # Returns: "app:feature:chat:time_percentage"
    """
    parts = [namespace, "feature", str(feature), dimension.value]
    return DELIMITER.join(part for part in parts if part is not None)


@dataclass(frozen=True)
class KeyNamer:
    """Key builder bound to a namespace."""

    namespace: str | None = None

    def key(self, feature: str, dimension: Dimension) -> str:
        return build_key(feature, dimension, self.namespace)

    def groups(self, feature: str) -> str:
        return self.key(feature, Dimension.GROUPS)

    def users(self, feature: str) -> str:
        return self.key(feature, Dimension.USERS)

    def percentage(self, feature: str) -> str:
        return self.key(feature, Dimension.PERCENTAGE)

    def percentage_of_time(self, feature: str) -> str:
        return self.key(feature, Dimension.PERCENTAGE_OF_TIME)

    def value(self, name: str) -> str:
        return self.key(name, Dimension.VALUE)
