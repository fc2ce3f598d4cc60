"""
Tests for the group registry.
"""

from rollout.core.features.groups import ALL_GROUP, GroupRegistry


def test_all_group_is_built_in(make_user):
    groups = GroupRegistry()

    assert ALL_GROUP in groups
    assert groups.get("all")(make_user(0)) is True


def test_define_and_overwrite(make_user):
    groups = GroupRegistry()
    groups.define("fivesonly", lambda user: user.id == 5)
    assert groups.get("fivesonly")(make_user(5)) is True

    groups.define("fivesonly", lambda user: False)
    assert groups.get("fivesonly")(make_user(5)) is False


def test_define_as_decorator(make_user):
    groups = GroupRegistry()

    @groups.define("admins")
    def admins(user):
        return user.is_admin

    assert admins(make_user(1, is_admin=True)) is True
    assert groups.get("admins") is admins


def test_unknown_group_is_none():
    assert GroupRegistry().get("nope") is None


def test_registries_are_independent():
    first = GroupRegistry()
    second = GroupRegistry()
    first.define("beta", lambda user: True)

    assert first.has("beta")
    assert not second.has("beta")
    assert second.names() == ["all"]


def test_initial_groups():
    groups = GroupRegistry({"staff": lambda user: True})
    assert groups.names() == ["all", "staff"]
    assert len(groups) == 2


def test_rollout_group_decorator(any_rollout, make_user):
    @any_rollout.group("admins")
    def admins(user):
        return user.is_admin

    any_rollout.activate_group("chat", "admins")

    assert any_rollout.groups.get("admins") is admins
    assert any_rollout.active("chat", make_user(1, is_admin=True))
    assert not any_rollout.active("chat", make_user(2))


def test_define_group_as_decorator(rollout, make_user):
    @rollout.define_group("fivesonly")
    def fives_only(user):
        return user.id == 5

    rollout.activate_group("chat", "fivesonly")

    assert fives_only(make_user(5)) is True
    assert rollout.active("chat", make_user(5))
    assert not rollout.active("chat", make_user(6))
