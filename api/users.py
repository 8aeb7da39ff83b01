"""REST API endpoints for user game state.

Each endpoint maps 1:1 to a command or query of the user application
layer. Error responses share the body shape ``{"message": str}``:

- 400: userID is not numeric (upgrades, friends)
- 404: no user for the given userID, including numbers no stored
  userID can equal (e.g. 5.5)
- 500: store failure, with the underlying error text
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from application.user import (
    AddFriendCommand,
    AddUpgradeCommand,
    GetUserQuery,
    SetClicksCommand,
)
from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_id import STORE_INT_MAX, STORE_INT_MIN, UserId
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.exceptions.user_errors import (
    InvalidUserIdError,
    UserDomainError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
INVALID_USER_ID = "Invalid userID format"

router = APIRouter(prefix="/api", tags=["users"])


# ============================================
# Request / response models
# ============================================


class ClicksUpdate(BaseModel):
    """Body of POST /api/clicks."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userID", ge=STORE_INT_MIN, le=STORE_INT_MAX)
    clicks: Optional[int] = Field(default=None, ge=STORE_INT_MIN, le=STORE_INT_MAX)


class UpgradePurchase(BaseModel):
    """Body of POST /api/upgrades."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userID", ge=STORE_INT_MIN, le=STORE_INT_MAX)
    upgrade_name: str = Field(alias="upgradeName")


class FriendRequest(BaseModel):
    """Body of POST /api/friends/add."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userID", ge=STORE_INT_MIN, le=STORE_INT_MAX)
    friend_id: int = Field(alias="friendID", ge=STORE_INT_MIN, le=STORE_INT_MAX)


class UserResponse(BaseModel):
    """Full user document as returned by write endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    user_id: int = Field(alias="userID")
    clicks: int
    upgrades: List[str]
    friends: List[int]

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            user_id=user.user_id.value,
            clicks=user.clicks,
            upgrades=list(user.upgrades),
            friends=list(user.friends),
        )


class ClicksResponse(BaseModel):
    clicks: int


class UpgradesResponse(BaseModel):
    upgrades: List[str]


class FriendsResponse(BaseModel):
    friends: List[int]


# ============================================
# Dependencies & error mapping
# ============================================


def get_user_repository(request: Request) -> IUserRepository:
    """Store handle attached to the application at startup."""
    repository: IUserRepository = request.app.state.user_repository
    return repository


def to_http_error(error: UserDomainError) -> HTTPException:
    """Translate a domain error into the HTTP error returned to callers."""
    if isinstance(error, UserNotFoundError):
        return HTTPException(status_code=404, detail=USER_NOT_FOUND)
    if isinstance(error, InvalidUserIdError):
        return HTTPException(status_code=400, detail=INVALID_USER_ID)
    # RepositoryError and anything unexpected surface their message as-is
    return HTTPException(status_code=500, detail=str(error))


def cast_error(raw: str) -> HTTPException:
    """userID that cannot be cast for the loose clicks lookup."""
    return HTTPException(
        status_code=500,
        detail=f'Cast to Number failed for value "{raw}" at path "userID"',
    )


# ============================================
# Endpoints
# ============================================


@router.get("/clicks", response_model=ClicksResponse)
async def get_clicks(
    user_id: Optional[str] = Query(default=None, alias="userID"),
    repository: IUserRepository = Depends(get_user_repository),
) -> ClicksResponse:
    """Return the click counter of a user.

    userID is matched loosely against the stored integer ("5", " 5",
    "5.0" all match 5). A missing or empty userID matches nothing (404).
    A value that cannot be cast at all is a store cast failure (500),
    not a 400 like the list endpoints.
    """
    if not user_id:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    try:
        uid = UserId.lookup(user_id)
    except InvalidUserIdError as e:
        raise cast_error(user_id) from e

    try:
        clicks = await GetUserQuery(repository).clicks(uid)
    except UserDomainError as e:
        raise to_http_error(e) from e
    return ClicksResponse(clicks=clicks)


@router.post("/clicks", response_model=UserResponse)
async def set_clicks(
    body: ClicksUpdate,
    repository: IUserRepository = Depends(get_user_repository),
) -> UserResponse:
    """Overwrite a user's click counter, creating the user if needed."""
    try:
        user = await SetClicksCommand(repository).execute(UserId(body.user_id), body.clicks)
    except UserDomainError as e:
        logger.error(
            "clicks.update_failed user_id=%s error=%s",
            body.user_id,
            e,
            extra={"user_id": body.user_id, "error": str(e)},
        )
        raise to_http_error(e) from e
    return UserResponse.from_entity(user)


@router.post("/upgrades", response_model=UserResponse)
async def add_upgrade(
    body: UpgradePurchase,
    repository: IUserRepository = Depends(get_user_repository),
) -> UserResponse:
    """Record a purchased upgrade (idempotent), creating the user if needed."""
    try:
        user = await AddUpgradeCommand(repository).execute(
            UserId(body.user_id), body.upgrade_name
        )
    except UserDomainError as e:
        logger.error(
            "upgrades.store_failed user_id=%s upgrade=%s error=%s",
            body.user_id,
            body.upgrade_name,
            e,
            extra={"user_id": body.user_id, "error": str(e)},
        )
        raise to_http_error(e) from e
    return UserResponse.from_entity(user)


@router.get("/upgrades", response_model=UpgradesResponse)
async def list_upgrades(
    user_id: Optional[str] = Query(default=None, alias="userID"),
    repository: IUserRepository = Depends(get_user_repository),
) -> UpgradesResponse:
    """List a user's upgrades. userID must be numeric; empty reads as 0."""
    try:
        upgrades = await GetUserQuery(repository).upgrades(UserId.lookup(user_id))
    except UserDomainError as e:
        raise to_http_error(e) from e
    return UpgradesResponse(upgrades=upgrades)


@router.get("/friends", response_model=FriendsResponse)
async def list_friends(
    user_id: Optional[str] = Query(default=None, alias="userID"),
    repository: IUserRepository = Depends(get_user_repository),
) -> FriendsResponse:
    """List a user's friends. userID must be numeric; empty reads as 0."""
    try:
        friends = await GetUserQuery(repository).friends(UserId.lookup(user_id))
    except UserDomainError as e:
        raise to_http_error(e) from e
    return FriendsResponse(friends=friends)


@router.post("/friends/add", response_model=UserResponse)
async def add_friend(
    body: FriendRequest,
    repository: IUserRepository = Depends(get_user_repository),
) -> UserResponse:
    """Link two users as mutual friends and return the requesting side."""
    try:
        user = await AddFriendCommand(repository).execute(
            UserId(body.user_id), UserId(body.friend_id)
        )
    except UserDomainError as e:
        logger.error(
            "friends.add_failed user_id=%s friend_id=%s error=%s",
            body.user_id,
            body.friend_id,
            e,
            extra={
                "user_id": body.user_id,
                "friend_id": body.friend_id,
                "error": str(e),
            },
        )
        raise to_http_error(e) from e
    return UserResponse.from_entity(user)
