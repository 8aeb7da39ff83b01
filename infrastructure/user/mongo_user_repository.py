"""MongoDB User Repository implementation."""

import logging
from typing import Any, Dict, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import UserId
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.exceptions.user_errors import (
    RepositoryError,
    UserDomainError,
    UserNotFoundError,
)
from infrastructure.config import use_mongodb_transactions
from infrastructure.persistence.mongodb.base import MongoBaseRepository

logger = logging.getLogger(__name__)


class MongoUserRepository(MongoBaseRepository[User], IUserRepository):
    """MongoDB implementation of User repository.

    Document shape:
    - _id: store identity (ObjectId)
    - userID: external identity, unique index
    - clicks: int, default 0
    - upgrades: [str], updated with $addToSet
    - friends: [int], updated with $addToSet

    Every write is a single find_one_and_update. Fields not touched by an
    upsert are initialised through $setOnInsert, so a newly created user
    always carries the full default shape.

    Examples:
        >>> repo = MongoUserRepository(AsyncIOMotorClient(uri))
        >>> user = await repo.set_clicks(UserId(5), 10, upsert=True)
        >>> found = await repo.find_by_user_id(UserId(5))
    """

    def __init__(
        self,
        client: Optional[AsyncIOMotorClient] = None,
        collection_name: Optional[str] = None,
        use_transactions: Optional[bool] = None,
    ) -> None:
        """Initialize repository.

        Args:
            client: Motor client (if None, built from MONGODB_URI)
            collection_name: Collection override
            use_transactions: Run add_friendship in a transaction
                (default from MONGODB_TRANSACTIONS)
        """
        super().__init__(client, collection_name)
        self.use_transactions = (
            use_mongodb_transactions() if use_transactions is None else use_transactions
        )

    def to_document(self, user: User) -> Dict[str, Any]:
        return {
            "userID": user.user_id.value,
            "clicks": user.clicks,
            "upgrades": list(user.upgrades),
            "friends": list(user.friends),
        }

    def from_document(self, doc: Dict[str, Any]) -> User:
        return User(
            user_id=UserId.parse(doc["userID"]),
            clicks=doc.get("clicks", 0),
            upgrades=list(doc.get("upgrades", [])),
            friends=[int(f) for f in doc.get("friends", [])],
            id=str(doc["_id"]) if "_id" in doc else None,
        )

    async def ensure_indexes(self) -> None:
        """Create the unique index on userID (idempotent)."""
        try:
            await self.collection.create_index("userID", unique=True)
        except PyMongoError as e:
            raise self._fail("create_index", {}, e) from e

    async def find_by_user_id(self, user_id: UserId) -> Optional[User]:
        doc = await self._find_one({"userID": user_id.value})
        if not doc:
            return None
        return self.from_document(doc)

    async def set_clicks(self, user_id: UserId, clicks: Optional[int], upsert: bool) -> User:
        update: Dict[str, Any] = {}
        touched = []
        if clicks is not None:
            update["$set"] = {"clicks": clicks}
            touched.append("clicks")
        update["$setOnInsert"] = self._insert_defaults(user_id, exclude=touched)
        return await self._update_user(user_id, update, upsert)

    async def add_upgrade(self, user_id: UserId, upgrade_name: str, upsert: bool) -> User:
        update = {
            "$addToSet": {"upgrades": upgrade_name},
            "$setOnInsert": self._insert_defaults(user_id, exclude=["upgrades"]),
        }
        return await self._update_user(user_id, update, upsert)

    async def add_friendship(self, user_id: UserId, friend_id: UserId, upsert: bool) -> User:
        if self.use_transactions:
            return await self._add_friendship_in_transaction(user_id, friend_id, upsert)
        return await self._add_friendship_compensated(user_id, friend_id, upsert)

    # ============================================================
    # Internals
    # ============================================================

    def _insert_defaults(self, user_id: UserId, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """Default document fields for an upsert, minus the updated ones.

        userID comes from the equality filter on insert and is never
        repeated here.
        """
        defaults = self.to_document(User.create(user_id))
        for name in ["userID", *exclude]:
            defaults.pop(name, None)
        return defaults

    def _friend_update(self, user_id: UserId, friend_id: UserId) -> Dict[str, Any]:
        return {
            "$addToSet": {"friends": friend_id.value},
            "$setOnInsert": self._insert_defaults(user_id, exclude=["friends"]),
        }

    async def _update_user(
        self,
        user_id: UserId,
        update: Dict[str, Any],
        upsert: bool,
        session: Any = None,
    ) -> User:
        doc = await self._find_one_and_update(
            {"userID": user_id.value}, update, upsert=upsert, session=session
        )
        if doc is None:
            raise UserNotFoundError(user_id.value)
        return self.from_document(doc)

    async def _add_friendship_in_transaction(
        self, user_id: UserId, friend_id: UserId, upsert: bool
    ) -> User:
        try:
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    user = await self._update_user(
                        user_id, self._friend_update(user_id, friend_id), upsert, session
                    )
                    await self._update_user(
                        friend_id, self._friend_update(friend_id, user_id), upsert, session
                    )
        except PyMongoError as e:
            # Raised by session start or commit, outside the wrapped helpers
            raise self._fail("add_friendship", {"userID": user_id.value}, e) from e
        return user

    async def _add_friendship_compensated(
        self, user_id: UserId, friend_id: UserId, upsert: bool
    ) -> User:
        """Sequential two-sided update for servers without transactions.

        If the second side fails, the link added on the first side is
        pulled again so no one-sided friendship is left behind.
        """
        first = await self._update_one(
            {"userID": user_id.value}, self._friend_update(user_id, friend_id), upsert
        )
        if first.matched_count == 0 and first.upserted_id is None:
            raise UserNotFoundError(user_id.value)
        added = first.modified_count > 0 or first.upserted_id is not None

        try:
            second = await self._update_one(
                {"userID": friend_id.value}, self._friend_update(friend_id, user_id), upsert
            )
            if second.matched_count == 0 and second.upserted_id is None:
                raise UserNotFoundError(friend_id.value)
        except UserDomainError:
            if added:
                await self._unlink(user_id, friend_id)
            raise

        doc = await self._find_one({"userID": user_id.value})
        if doc is None:
            raise UserNotFoundError(user_id.value)
        return self.from_document(doc)

    async def _unlink(self, user_id: UserId, friend_id: UserId) -> None:
        try:
            await self._update_one(
                {"userID": user_id.value}, {"$pull": {"friends": friend_id.value}}
            )
        except RepositoryError as e:
            logger.error(
                "friendship.asymmetric user_id=%s friend_id=%s error=%s",
                user_id.value,
                friend_id.value,
                e,
                extra={
                    "user_id": user_id.value,
                    "friend_id": friend_id.value,
                    "error": str(e),
                },
            )
