"""ORM model for roles a user can possess."""

import enum

from sqlalchemy import Column, Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base


class RoleKind(str, enum.Enum):
    """Closed set of role names a user can be assigned."""

    ROLE_ADMIN = "ROLE_ADMIN"
    ROLE_USER = "ROLE_USER"

    @property
    def description(self) -> str:
        return ROLE_DESCRIPTIONS[self]


ROLE_DESCRIPTIONS: dict[RoleKind, str] = {
    RoleKind.ROLE_ADMIN: "Administrator: Full access",
    RoleKind.ROLE_USER: "User: Read, Edit himself",
}


class Role(Base):
    """
    Stored role, one row per RoleKind.

    Rows are created lazily the first time a user is assigned the role and
    are never deleted together with users.
    """

    __tablename__ = "role"
    __table_args__ = (UniqueConstraint("name", name="uq_role_name"),)

    id = Column("role_id", Integer, primary_key=True, autoincrement=True)
    name = Column(
        Enum(RoleKind, name="role_kind", native_enum=False, length=32),
        nullable=False,
    )
    description = Column(String(255), nullable=False, default="")

    users = relationship("User", secondary="users_roles", back_populates="roles")

    def __repr__(self) -> str:
        return f"Role(id={self.id!r}, name={self.name!r})"
