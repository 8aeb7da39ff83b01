"""Tests for InMemoryUserRepository."""

import pytest

from infrastructure.user.in_memory_user_repository import InMemoryUserRepository
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.exceptions.user_errors import UserNotFoundError


class TestInMemoryUserRepository:
    """Test InMemoryUserRepository implementation."""

    @pytest.fixture
    def repository(self):
        """Create fresh repository for each test."""
        return InMemoryUserRepository()

    @pytest.mark.asyncio
    async def test_find_non_existent_returns_none(self, repository):
        assert await repository.find_by_user_id(UserId(1)) is None

    @pytest.mark.asyncio
    async def test_upsert_assigns_store_id_once(self, repository):
        first = await repository.set_clicks(UserId(1), 3, upsert=True)
        second = await repository.add_upgrade(UserId(1), "laser", upsert=True)

        assert first.id is not None
        assert second.id == first.id
        assert (await repository.find_by_user_id(UserId(1))).id == first.id

    @pytest.mark.asyncio
    async def test_writes_without_upsert_require_existing_user(self, repository):
        with pytest.raises(UserNotFoundError):
            await repository.set_clicks(UserId(1), 3, upsert=False)
        with pytest.raises(UserNotFoundError):
            await repository.add_upgrade(UserId(1), "laser", upsert=False)
        with pytest.raises(UserNotFoundError):
            await repository.add_friendship(UserId(1), UserId(2), upsert=False)

        assert await repository.find_by_user_id(UserId(1)) is None
        assert await repository.find_by_user_id(UserId(2)) is None

    @pytest.mark.asyncio
    async def test_friendship_without_upsert_leaves_no_one_sided_link(self, repository):
        await repository.set_clicks(UserId(1), 0, upsert=True)

        with pytest.raises(UserNotFoundError):
            await repository.add_friendship(UserId(1), UserId(2), upsert=False)

        user = await repository.find_by_user_id(UserId(1))
        assert user.friends == []
        assert await repository.find_by_user_id(UserId(2)) is None

    @pytest.mark.asyncio
    async def test_friendship_creates_both_users(self, repository):
        user = await repository.add_friendship(UserId(1), UserId(2), upsert=True)

        assert user.friends == [2]
        assert (await repository.find_by_user_id(UserId(2))).friends == [1]

    @pytest.mark.asyncio
    async def test_self_friendship_stored_once(self, repository):
        user = await repository.add_friendship(UserId(3), UserId(3), upsert=True)

        assert user.friends == [3]
        assert (await repository.find_by_user_id(UserId(3))).friends == [3]

    @pytest.mark.asyncio
    async def test_returned_users_are_detached(self, repository):
        user = await repository.add_upgrade(UserId(1), "laser", upsert=True)
        user.upgrades.append("hacked")

        stored = await repository.find_by_user_id(UserId(1))
        assert stored.upgrades == ["laser"]

    @pytest.mark.asyncio
    async def test_ping(self, repository):
        assert await repository.ping() is True
