"""User repository port (interface)."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId


class IUserRepository(ABC):
    """Repository interface for User aggregate.

    Every write is a single atomic document update. Writes take an explicit
    ``upsert`` flag: when True a missing user is created with default state
    before the update is applied, when False a missing user raises
    UserNotFoundError and nothing is created.

    Implementations must wrap store failures in RepositoryError.

    Examples:
        >>> user = await repository.set_clicks(UserId(5), 10, upsert=True)
        >>> user.clicks
        10
    """

    @abstractmethod
    async def find_by_user_id(self, user_id: UserId) -> Optional[User]:
        """Find user by external userID.

        Args:
            user_id: External user identifier

        Returns:
            User entity if found, None otherwise

        Note:
            Never creates a record.
        """
        pass

    @abstractmethod
    async def set_clicks(self, user_id: UserId, clicks: Optional[int], upsert: bool) -> User:
        """Overwrite the click counter.

        Args:
            user_id: External user identifier
            clicks: New counter value; None leaves the stored value untouched
            upsert: Create the user if absent

        Returns:
            Post-update user

        Raises:
            UserNotFoundError: If absent and upsert is False
            RepositoryError: If the store operation fails
        """
        pass

    @abstractmethod
    async def add_upgrade(self, user_id: UserId, upgrade_name: str, upsert: bool) -> User:
        """Add an upgrade with set-union semantics.

        Args:
            user_id: External user identifier
            upgrade_name: Upgrade to add (no-op if already present)
            upsert: Create the user if absent

        Returns:
            Post-update user

        Raises:
            UserNotFoundError: If absent and upsert is False
            RepositoryError: If the store operation fails
        """
        pass

    @abstractmethod
    async def add_friendship(self, user_id: UserId, friend_id: UserId, upsert: bool) -> User:
        """Link two users as mutual friends.

        Adds friend_id to user_id's friends and user_id to friend_id's
        friends. Both updates are applied or neither is.

        Args:
            user_id: User initiating the request
            friend_id: User being added
            upsert: Create either user if absent

        Returns:
            Post-update user_id side

        Raises:
            UserNotFoundError: If either side is absent and upsert is False
            RepositoryError: If the store operation fails
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check store connectivity.

        Returns:
            True if the store answered

        Raises:
            RepositoryError: If the store is unreachable
        """
        pass

    async def close(self) -> None:
        """Release store resources. Default: nothing to release."""
        return None
