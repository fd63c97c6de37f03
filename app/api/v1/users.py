"""User account endpoints: signup, lookup, password change and deletion."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_current_user, get_user_store
from app.schemas.auth import TokenClaims
from app.schemas.users import (
    DeleteUserResponse,
    PasswordCheck,
    PasswordUpdate,
    UserCreate,
    UserRead,
    UsersListResponse,
)
from app.services import users as user_service
from app.services.user_store import (
    SqlUserStore,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserStoreError,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


def _require_self(current_user: TokenClaims, user_id: int) -> None:
    if current_user.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot modify another user's account",
        )


def _store_failure(e: UserStoreError) -> HTTPException:
    logger.error("User request failed", extra={"reason": e.message})
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
) -> UserRead:
    """Register a new account with role 'user'. The password is stored only as a bcrypt hash."""
    try:
        user = user_service.create_user(store, body.name, body.email, body.password)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e
    except UserStoreError as e:
        raise _store_failure(e) from e
    return UserRead.model_validate(user)


@router.get("", response_model=UsersListResponse)
def list_users(
    store: Annotated[SqlUserStore, Depends(get_user_store)],
) -> UsersListResponse:
    try:
        users = user_service.list_users(store)
    except UserStoreError as e:
        raise _store_failure(e) from e
    return UsersListResponse(users=[UserRead.model_validate(u) for u in users])


@router.get("/by-email/{email}", response_model=UserRead)
def get_user_by_email(
    email: str,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    _user: Annotated[TokenClaims, Depends(get_current_user)],
) -> UserRead:
    try:
        user = user_service.get_user_by_email(store, email)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except UserStoreError as e:
        raise _store_failure(e) from e
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
) -> UserRead:
    try:
        user = user_service.get_user(store, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except UserStoreError as e:
        raise _store_failure(e) from e
    return UserRead.model_validate(user)


@router.put("/{user_id}/password", response_model=UserRead)
def update_password(
    user_id: int,
    body: PasswordUpdate,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    current_user: Annotated[TokenClaims, Depends(get_current_user)],
) -> UserRead:
    """Replace the caller's own password. Existing tokens stay valid until they expire."""
    _require_self(current_user, user_id)
    try:
        user = user_service.change_password(store, user_id, body.password)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except UserStoreError as e:
        raise _store_failure(e) from e
    return UserRead.model_validate(user)


@router.delete("/{user_id}", response_model=DeleteUserResponse)
def delete_user(
    user_id: int,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    current_user: Annotated[TokenClaims, Depends(get_current_user)],
) -> DeleteUserResponse:
    """Delete the caller's own account."""
    _require_self(current_user, user_id)
    try:
        user_service.delete_user(store, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except UserStoreError as e:
        raise _store_failure(e) from e
    return DeleteUserResponse(message=f"User with id {user_id} deleted")


@router.post("/{user_id}/check-password", response_model=bool)
def check_password(
    user_id: int,
    body: PasswordCheck,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    _user: Annotated[TokenClaims, Depends(get_current_user)],
) -> bool:
    """Return whether the given password matches the user's stored hash."""
    try:
        return user_service.check_password(store, user_id, body.password)
    except UserStoreError as e:
        raise _store_failure(e) from e
