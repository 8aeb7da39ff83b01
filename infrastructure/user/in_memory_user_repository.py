"""In-memory User Repository for testing."""

from typing import Dict, Optional

from bson import ObjectId

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.exceptions.user_errors import UserNotFoundError


class InMemoryUserRepository(IUserRepository):
    """In-memory implementation of User repository for testing.

    Stores users in memory keyed by userID. Useful for unit tests and
    local runs without MongoDB.

    No operation awaits between reading and writing its documents, so every
    operation (including the two-sided add_friendship) is atomic on the
    event loop. Callers always receive detached copies.

    Examples:
        >>> repo = InMemoryUserRepository()
        >>> await repo.set_clicks(UserId(5), 10, upsert=True)
        >>> found = await repo.find_by_user_id(UserId(5))
    """

    def __init__(self) -> None:
        """Initialize empty in-memory storage."""
        self._users: Dict[int, User] = {}

    async def find_by_user_id(self, user_id: UserId) -> Optional[User]:
        user = self._users.get(user_id.value)
        return user.copy() if user else None

    async def set_clicks(self, user_id: UserId, clicks: Optional[int], upsert: bool) -> User:
        user = self._get_for_update(user_id, upsert)
        if clicks is not None:
            user.set_clicks(clicks)
        self._users[user_id.value] = user
        return user.copy()

    async def add_upgrade(self, user_id: UserId, upgrade_name: str, upsert: bool) -> User:
        user = self._get_for_update(user_id, upsert)
        user.add_upgrade(upgrade_name)
        self._users[user_id.value] = user
        return user.copy()

    async def add_friendship(self, user_id: UserId, friend_id: UserId, upsert: bool) -> User:
        # Resolve both sides before mutating either one
        user = self._get_for_update(user_id, upsert)
        friend = user if friend_id == user_id else self._get_for_update(friend_id, upsert)

        user.add_friend(friend_id)
        friend.add_friend(user_id)
        self._users[user_id.value] = user
        self._users[friend_id.value] = friend
        return user.copy()

    async def ping(self) -> bool:
        return True

    def _get_for_update(self, user_id: UserId, upsert: bool) -> User:
        user = self._users.get(user_id.value)
        if user is not None:
            return user
        if not upsert:
            raise UserNotFoundError(user_id.value)
        return User.create(user_id, id=str(ObjectId()))
