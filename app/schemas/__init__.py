"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser
from app.schemas.health import HealthResponse
from app.schemas.users import (
    CreateUserRequest,
    PartialUpdateUserRequest,
    UpdateUserRequest,
    UserResponse,
)

__all__ = [
    "CreateUserRequest",
    "CurrentUser",
    "HealthResponse",
    "PartialUpdateUserRequest",
    "UpdateUserRequest",
    "UserResponse",
]
