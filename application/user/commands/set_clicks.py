"""Set clicks command."""

import logging
from dataclasses import dataclass
from typing import Optional

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.ports.user_repository import IUserRepository

logger = logging.getLogger(__name__)


@dataclass
class SetClicksCommand:
    """Command to overwrite a user's click counter.

    The write is an overwrite, not an increment: concurrent calls for the
    same user are last-write-wins. A previously unseen user is created.

    Examples:
        >>> command = SetClicksCommand(repository)
        >>> user = await command.execute(UserId(5), 10)
        >>> user.clicks
        10
    """

    repository: IUserRepository

    async def execute(self, user_id: UserId, clicks: Optional[int]) -> User:
        """Execute set clicks command.

        Args:
            user_id: External user identifier
            clicks: New counter value (None keeps the stored value)

        Returns:
            Post-update user

        Raises:
            RepositoryError: If the store operation fails
        """
        logger.info(
            "clicks.update_received user_id=%s clicks=%s",
            user_id.value,
            clicks,
            extra={"user_id": user_id.value, "clicks": clicks},
        )
        return await self.repository.set_clicks(user_id, clicks, upsert=True)
