"""Add upgrade command."""

from dataclasses import dataclass

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.ports.user_repository import IUserRepository


@dataclass
class AddUpgradeCommand:
    """Command to record a purchased upgrade.

    Idempotent: adding the same upgrade twice leaves a single entry.

    Examples:
        >>> command = AddUpgradeCommand(repository)
        >>> user = await command.execute(UserId(5), "laser")
        >>> user.upgrades
        ['laser']
    """

    repository: IUserRepository

    async def execute(self, user_id: UserId, upgrade_name: str) -> User:
        """Execute add upgrade command.

        Args:
            user_id: External user identifier
            upgrade_name: Upgrade to add

        Returns:
            Post-update user

        Raises:
            RepositoryError: If the store operation fails
        """
        return await self.repository.add_upgrade(user_id, upgrade_name, upsert=True)
