"""User repository factory for environment-based selection.

This factory creates the appropriate repository implementation based on
the USER_REPOSITORY environment variable:
- "mongodb": MongoUserRepository (production)
- "inmemory": InMemoryUserRepository (tests, local demos)

Default: mongodb, which requires MONGODB_URI.
"""

from motor.motor_asyncio import AsyncIOMotorClient

from domain.user.core.ports.user_repository import IUserRepository
from infrastructure.config import get_repository_backend, require_mongodb_uri
from infrastructure.user.in_memory_user_repository import (
    InMemoryUserRepository,
)
from infrastructure.user.mongo_user_repository import MongoUserRepository


def create_user_repository() -> IUserRepository:
    """Create user repository based on environment configuration.

    Returns:
        IUserRepository: The configured repository implementation

    Raises:
        ConfigurationError: If USER_REPOSITORY is unknown, or mongodb is
            selected and MONGODB_URI is missing

    Environment Variables:
        USER_REPOSITORY: "mongodb" | "inmemory" (default: mongodb)
        MONGODB_URI: MongoDB connection string (required for mongodb)
        MONGODB_DATABASE: Database name (default: clicker)
    """
    repo_type = get_repository_backend()

    if repo_type == "inmemory":
        return InMemoryUserRepository()

    # Motor connects lazily: no I/O happens here
    client: AsyncIOMotorClient = AsyncIOMotorClient(require_mongodb_uri())
    return MongoUserRepository(client)
