"""Add friend command."""

from dataclasses import dataclass

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.ports.user_repository import IUserRepository


@dataclass
class AddFriendCommand:
    """Command to link two users as mutual friends.

    Both sides are created if absent. The returned user is the requesting
    side (user_id), with friend_id in its friends.

    Examples:
        >>> command = AddFriendCommand(repository)
        >>> user = await command.execute(UserId(5), UserId(9))
        >>> user.friends
        [9]
    """

    repository: IUserRepository

    async def execute(self, user_id: UserId, friend_id: UserId) -> User:
        """Execute add friend command.

        Args:
            user_id: User initiating the request
            friend_id: User being added as friend

        Returns:
            Post-update user_id side

        Raises:
            RepositoryError: If either update fails (no link is kept)
        """
        return await self.repository.add_friendship(user_id, friend_id, upsert=True)
