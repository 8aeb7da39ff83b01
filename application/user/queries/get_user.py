"""Get user queries."""

from dataclasses import dataclass
from typing import List, Optional

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.exceptions.user_errors import UserNotFoundError


@dataclass
class GetUserQuery:
    """Read-only lookups of a user's game state.

    Unlike the commands, these never create a record: a missing user
    raises UserNotFoundError. A None userID (see UserId.lookup) matches no
    record and is not sent to the store.

    Examples:
        >>> query = GetUserQuery(repository)
        >>> await query.clicks(UserId(5))
        10
        >>> await query.upgrades(UserId(5))
        ['laser']
    """

    repository: IUserRepository

    async def by_user_id(self, user_id: Optional[UserId]) -> User:
        """Get user by external userID.

        Raises:
            UserNotFoundError: If user doesn't exist
            RepositoryError: If the store operation fails
        """
        if user_id is None:
            raise UserNotFoundError(None)
        user = await self.repository.find_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id.value)
        return user

    async def clicks(self, user_id: Optional[UserId]) -> int:
        user = await self.by_user_id(user_id)
        return user.clicks

    async def upgrades(self, user_id: Optional[UserId]) -> List[str]:
        user = await self.by_user_id(user_id)
        return user.upgrades

    async def friends(self, user_id: Optional[UserId]) -> List[int]:
        user = await self.by_user_id(user_id)
        return user.friends
