"""User domain exceptions."""

from typing import Any


class UserDomainError(Exception):
    """Base exception for User domain errors."""

    pass


class UserNotFoundError(UserDomainError):
    """User was not found in the repository."""

    def __init__(self, user_id: Any):
        """Initialize with user identifier.

        Args:
            user_id: userID that was not found
        """
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class InvalidUserIdError(UserDomainError):
    """userID could not be parsed as a number."""

    def __init__(self, raw: Any):
        """Initialize with the raw value received.

        Args:
            raw: Value that failed numeric parsing
        """
        self.raw = raw
        super().__init__(f"Invalid userID format: {raw!r}")


class RepositoryError(UserDomainError):
    """Document store operation failed.

    Carries the underlying driver message so it can be surfaced to callers.
    """

    def __init__(self, message: str, operation: str = ""):
        self.operation = operation
        super().__init__(message)
