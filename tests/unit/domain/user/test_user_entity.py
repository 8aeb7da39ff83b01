"""Tests for User entity."""

import pytest

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId


@pytest.fixture
def user():
    return User.create(UserId(5))


def test_create_has_default_state(user):
    assert user.user_id == UserId(5)
    assert user.clicks == 0
    assert user.upgrades == []
    assert user.friends == []
    assert user.id is None


def test_set_clicks_overwrites(user):
    user.set_clicks(10)
    user.set_clicks(3)

    assert user.clicks == 3


def test_add_upgrade_is_set_union(user):
    assert user.add_upgrade("laser") is True
    assert user.add_upgrade("laser") is False
    assert user.add_upgrade("shield") is True

    assert user.upgrades == ["laser", "shield"]


def test_add_friend_is_set_union(user):
    assert user.add_friend(UserId(9)) is True
    assert user.add_friend(UserId(9)) is False

    assert user.friends == [9]


def test_duplicates_rejected_on_construction():
    with pytest.raises(ValueError, match="Duplicate upgrades"):
        User(user_id=UserId(1), upgrades=["a", "a"])

    with pytest.raises(ValueError, match="Duplicate friends"):
        User(user_id=UserId(1), friends=[2, 2])


def test_copy_is_detached(user):
    user.add_upgrade("laser")
    clone = user.copy()

    clone.add_upgrade("shield")
    clone.add_friend(UserId(2))

    assert user.upgrades == ["laser"]
    assert user.friends == []
    assert clone == User(user_id=UserId(5), upgrades=["laser", "shield"], friends=[2])
