"""ORM model for user accounts and their role assignments."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from app.models.base import Base

# Association table; owned by User, so deleting a user removes only its rows here.
users_roles = Table(
    "users_roles",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("user_account.user_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("role.role_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """
    User account managed through the /users API.

    password holds the bcrypt hash only. The table is named user_account
    because "user" is a reserved word in PostgreSQL.
    """

    __tablename__ = "user_account"

    id = Column("user_id", Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    roles = relationship(
        "Role",
        secondary=users_roles,
        back_populates="users",
        collection_class=set,
        lazy="selectin",
    )

    @property
    def role_names(self) -> list[str]:
        """Sorted role names, for responses and logging."""
        return sorted(role.name.value for role in self.roles)

    def __repr__(self) -> str:
        # Never include the password hash.
        return f"User(id={self.id!r}, username={self.username!r})"
