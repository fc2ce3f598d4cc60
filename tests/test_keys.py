"""
Tests for storage key naming.
"""

import pytest

from rollout.core.features.keys import Dimension, KeyNamer, ValueKind, build_key


@pytest.mark.parametrize(
    "dimension, expected",
    [
        (Dimension.GROUPS, "feature:chat:groups"),
        (Dimension.USERS, "feature:chat:users"),
        (Dimension.PERCENTAGE, "feature:chat:percentage"),
        (Dimension.PERCENTAGE_OF_TIME, "feature:chat:time_percentage"),
        (Dimension.VALUE, "feature:chat:value"),
    ],
)
def test_keys_without_namespace(dimension, expected):
    assert build_key("chat", dimension) == expected


def test_namespace_is_prepended():
    keys = KeyNamer("app")
    assert keys.groups("chat") == "app:feature:chat:groups"
    assert keys.percentage_of_time("chat") == "app:feature:chat:time_percentage"
    assert keys.value("motd") == "app:feature:motd:value"


def test_keys_are_stable():
    assert KeyNamer("app").users("chat") == KeyNamer("app").users("chat")


def test_dimension_kinds():
    assert Dimension.GROUPS.kind == ValueKind.SET
    assert Dimension.USERS.kind == ValueKind.SET
    assert Dimension.PERCENTAGE.kind == ValueKind.STRING
    assert Dimension.PERCENTAGE_OF_TIME.kind == ValueKind.STRING
    assert Dimension.VALUE.kind == ValueKind.STRING


def test_rollout_namespace_changes_keys(rollout, store):
    rollout.namespace = "tenant"
    rollout.activate_group("chat", "all")

    assert store.keys() == ["tenant:feature:chat:groups"]
