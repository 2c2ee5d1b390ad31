"""Schemas for the authenticated principal."""

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Authenticated principal resolved from HTTP Basic credentials.

    id is None for the configured admin, which has no stored row.
    """

    id: int | None = None
    username: str
    is_admin: bool = False
