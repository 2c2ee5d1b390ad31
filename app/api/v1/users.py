"""User account endpoints: CRUD over /users, Basic auth required."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import PasswordHasher
from app.schemas.auth import CurrentUser
from app.schemas.users import (
    CreateUserRequest,
    PartialUpdateUserRequest,
    UpdateUserRequest,
    UserResponse,
)
from app.services.users import UserService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    """Dependency: UserService bound to the request's DB session."""
    settings = get_settings()
    return UserService(
        db,
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        admin_username=settings.ADMIN_USERNAME,
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    service: Annotated[UserService, Depends(get_user_service)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    """Create a new user. 409 if the username is taken."""
    user = service.create_user(body)
    return UserResponse.from_user(user)


@router.get("", response_model=list[UserResponse])
def get_all_users(
    service: Annotated[UserService, Depends(get_user_service)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[UserResponse]:
    """List all users ordered by id."""
    return [UserResponse.from_user(u) for u in service.get_all_users()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(
    user_id: int,
    service: Annotated[UserService, Depends(get_user_service)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse.from_user(service.get_user_by_id(user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UpdateUserRequest,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    """
    Update an existing user. Only the user themself or the admin may do so;
    otherwise 403.
    """
    user = service.update_user(user_id, body, current_user.username)
    return UserResponse.from_user(user)


@router.patch("/{user_id}", response_model=UserResponse)
def partial_update_user(
    user_id: int,
    body: PartialUpdateUserRequest,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    """Update only the fields present in the body. Same authorization as PUT."""
    user = service.partial_update_user(user_id, body, current_user.username)
    return UserResponse.from_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Delete a user. Only the user themself or the admin may do so."""
    service.delete_user(user_id, current_user.username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
