"""Base MongoDB repository with reusable patterns.

Provides common functionality for MongoDB repositories:
- Connection management
- Document mapping (domain ↔ MongoDB)
- Error handling (driver errors wrapped in RepositoryError)
- Logging

No retry logic: a failed store operation is reported to the caller
immediately.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, Dict, Any
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError
from pymongo.results import UpdateResult

from domain.user.core.exceptions.user_errors import RepositoryError
from infrastructure.config import (
    get_mongodb_collection,
    get_mongodb_database,
    require_mongodb_uri,
)


TEntity = TypeVar("TEntity")  # Domain entity type

logger = logging.getLogger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB repositories.

    Provides common functionality:
    - Connection pooling (motor handles this automatically)
    - Document ↔ Entity mapping
    - Error handling with proper logging

    Subclasses must implement:
    - to_document(): Convert domain entity to MongoDB document
    - from_document(): Convert MongoDB document to domain entity

    Example:
        class MongoUserRepository(MongoBaseRepository[User]):
            def to_document(self, user: User) -> Dict[str, Any]:
                ...

            def from_document(self, doc: Dict[str, Any]) -> User:
                ...
    """

    def __init__(
        self,
        client: Optional[AsyncIOMotorClient] = None,
        collection_name: Optional[str] = None,
    ):
        """
        Initialize repository with optional client.

        Args:
            client: Motor client (if None, creates new one from config)
            collection_name: Collection override (default from MONGODB_COLLECTION)

        Raises:
            ConfigurationError: If no client is given and MONGODB_URI is not set
        """
        if client is None:
            client = AsyncIOMotorClient(require_mongodb_uri())
        self._client = client

        self._collection_name = collection_name or get_mongodb_collection()
        self._db = self._client[get_mongodb_database()]
        self._collection = self._db[self._collection_name]

        logger.info(
            f"Initialized {self.__class__.__name__} " f"for collection '{self._collection_name}'"
        )

    # ============================================================
    # Abstract Methods (must be implemented)
    # ============================================================

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """
        Convert domain entity to MongoDB document.

        Args:
            entity: Domain entity

        Returns:
            MongoDB document (dict), without _id
        """
        pass

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Args:
            doc: MongoDB document

        Returns:
            Domain entity

        Raises:
            ValueError: If document is invalid or missing required fields
        """
        pass

    # ============================================================
    # Protected Utility Methods (for subclasses)
    # ============================================================

    @property
    def client(self) -> AsyncIOMotorClient:
        return self._client

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """Get MongoDB collection handle."""
        return self._collection

    def _fail(self, operation: str, filter_dict: Dict[str, Any], error: PyMongoError) -> RepositoryError:
        logger.error(
            f"Error in {operation}: collection={self._collection_name}, "
            f"filter={filter_dict}, error={error}"
        )
        return RepositoryError(str(error), operation=operation)

    async def _find_one(
        self,
        filter_dict: Dict[str, Any],
        session: Any = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Find single document with error handling.

        Args:
            filter_dict: MongoDB filter
            session: Optional client session

        Returns:
            Document dict or None if not found

        Raises:
            RepositoryError: If MongoDB operation fails (logged)
        """
        try:
            doc: Optional[Dict[str, Any]] = await self._collection.find_one(
                filter_dict, session=session
            )
            return doc
        except PyMongoError as e:
            raise self._fail("find_one", filter_dict, e) from e

    async def _find_one_and_update(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
        upsert: bool = False,
        session: Any = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Atomically update a single document and return it post-update.

        Args:
            filter_dict: MongoDB filter
            update_dict: Update operations (e.g., {"$set": {...}})
            upsert: Create document if not found
            session: Optional client session (transactions)

        Returns:
            Updated document, or None if nothing matched and upsert is False

        Raises:
            RepositoryError: If MongoDB operation fails (logged)
        """
        try:
            doc: Optional[Dict[str, Any]] = await self._collection.find_one_and_update(
                filter_dict,
                update_dict,
                upsert=upsert,
                return_document=ReturnDocument.AFTER,
                session=session,
            )
            return doc
        except PyMongoError as e:
            raise self._fail("find_one_and_update", filter_dict, e) from e

    async def _update_one(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
        upsert: bool = False,
    ) -> UpdateResult:
        """
        Update single document with error handling.

        Args:
            filter_dict: MongoDB filter
            update_dict: Update operations (e.g., {"$set": {...}})
            upsert: Create document if not found

        Returns:
            UpdateResult (matched/modified counts, upserted_id)

        Raises:
            RepositoryError: If MongoDB operation fails (logged)
        """
        try:
            result: UpdateResult = await self._collection.update_one(
                filter_dict, update_dict, upsert=upsert
            )
            return result
        except PyMongoError as e:
            raise self._fail("update_one", filter_dict, e) from e

    async def ping(self) -> bool:
        """Round-trip to the server.

        Raises:
            RepositoryError: If the server is unreachable
        """
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            raise self._fail("ping", {}, e) from e

    async def close(self) -> None:
        """Close MongoDB connection."""
        self._client.close()
        logger.info(f"Closed connection for {self.__class__.__name__}")
