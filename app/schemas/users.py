"""Request/response schemas for the /users endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from app.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
)
from app.models import RoleKind, User


def _username_field(default: Any = ...) -> Any:
    return Field(
        default,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        pattern=USERNAME_PATTERN,
        description="Username: 3-30 characters, letters, digits, '_' or '-'",
    )


def _password_field(default: Any = ...) -> Any:
    return Field(
        default,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password: 8-72 characters",
        repr=False,
    )


class CreateUserRequest(BaseModel):
    """Body for POST /users."""

    username: str = _username_field()
    password: str = _password_field()
    first_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    roles: set[RoleKind] | None = Field(
        default=None,
        description="Assigned roles; defaults to ROLE_USER when omitted",
    )


class UpdateUserRequest(BaseModel):
    """Body for PUT /users/{id}: credentials required, other fields optional."""

    username: str = _username_field()
    password: str = _password_field()
    first_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    roles: set[RoleKind] | None = None


class PartialUpdateUserRequest(BaseModel):
    """Body for PATCH /users/{id}: every field optional; omitted means unchanged."""

    username: str | None = _username_field(None)
    password: str | None = _password_field(None)
    first_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    roles: set[RoleKind] | None = None


class UserResponse(BaseModel):
    """User as returned by the API (no password)."""

    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    roles: list[RoleKind] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            roles=[RoleKind(name) for name in user.role_names],
        )
