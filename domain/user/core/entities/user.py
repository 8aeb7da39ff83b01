"""User entity - aggregate root."""

from dataclasses import dataclass, field
from typing import List, Optional

from domain.user.core.value_objects.user_id import UserId


@dataclass
class User:
    """User aggregate root.

    Holds the persisted game state of a player: click counter, purchased
    upgrades and friends (other players' userIDs).

    Invariants:
    - user_id is unique across the store and immutable
    - upgrades contains no duplicates
    - friends contains no duplicates

    Collections are ordered by insertion but behave as sets: adding an
    element that is already present is a no-op.

    Examples:
        >>> user = User.create(UserId(5))
        >>> user.clicks
        0

        >>> user.add_upgrade("laser")
        True
        >>> user.add_upgrade("laser")
        False
        >>> user.upgrades
        ['laser']
    """

    user_id: UserId
    clicks: int = 0
    upgrades: List[str] = field(default_factory=list)
    friends: List[int] = field(default_factory=list)
    id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if len(set(self.upgrades)) != len(self.upgrades):
            raise ValueError(f"Duplicate upgrades for user {self.user_id}: {self.upgrades}")
        if len(set(self.friends)) != len(self.friends):
            raise ValueError(f"Duplicate friends for user {self.user_id}: {self.friends}")

    @staticmethod
    def create(user_id: UserId, id: Optional[str] = None) -> "User":
        """Create a user with default state (0 clicks, no upgrades, no friends).

        Args:
            user_id: External user identifier
            id: Store-assigned document id, if already known

        Returns:
            New User entity
        """
        return User(user_id=user_id, id=id)

    def set_clicks(self, clicks: int) -> None:
        """Overwrite the click counter (not an increment)."""
        self.clicks = clicks

    def add_upgrade(self, upgrade_name: str) -> bool:
        """Add upgrade with set-union semantics.

        Returns:
            True if the upgrade was added, False if already present
        """
        if upgrade_name in self.upgrades:
            return False
        self.upgrades.append(upgrade_name)
        return True

    def add_friend(self, friend_id: UserId) -> bool:
        """Add friend with set-union semantics.

        Returns:
            True if the friend was added, False if already present
        """
        if friend_id.value in self.friends:
            return False
        self.friends.append(friend_id.value)
        return True

    def copy(self) -> "User":
        """Detached copy (collections are not shared)."""
        return User(
            user_id=self.user_id,
            clicks=self.clicks,
            upgrades=list(self.upgrades),
            friends=list(self.friends),
            id=self.id,
        )
