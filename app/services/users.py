"""
User service: create, read, update, partially update and delete user accounts.

Each mutating call is one unit of work on the given session. Update, patch
and delete lock the target row (SELECT ... FOR UPDATE) before the
authorization check so the check and the write see the same state.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import PasswordHasher
from app.models import RoleKind, User
from app.schemas.users import CreateUserRequest
from app.services.authorization import can_modify
from app.services.errors import (
    UserAccessDeniedError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserServiceError,
)
from app.services.roles import RoleRegistry
from app.services.user_merge import UserChanges, merge_user

logger = logging.getLogger(__name__)

# Assigned on create when the request carries no roles.
DEFAULT_ROLES = frozenset({RoleKind.ROLE_USER})


class UserService:
    """Orchestrates role resolution, authorization and merging over a DB session."""

    def __init__(
        self,
        session: Session,
        hasher: PasswordHasher | None = None,
        admin_username: str | None = None,
    ) -> None:
        self.session = session
        self.hasher = hasher or PasswordHasher()
        self.admin_username = (
            admin_username if admin_username is not None else settings.ADMIN_USERNAME
        )
        self.role_registry = RoleRegistry(session)

    def _find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def _find_for_update(self, user_id: int) -> User | None:
        return (
            self.session.query(User)
            .filter(User.id == user_id)
            .with_for_update()
            .first()
        )

    def _authorize(self, user: User, acting_username: str) -> None:
        decision = can_modify(user.username, acting_username, self.admin_username)
        if not decision:
            logger.info(
                "Access denied",
                extra={"user_id": user.id, "owner": user.username, "actor": acting_username},
            )
            raise UserAccessDeniedError(user.username, acting_username, decision.reason)

    def create_user(self, request: CreateUserRequest) -> User:
        """Insert a new user with a hashed password. Raises UserAlreadyExistsError."""
        logger.info("Started create user", extra={"username": request.username})

        if self._find_by_username(request.username) is not None:
            raise UserAlreadyExistsError(request.username)

        role_names = request.roles if request.roles is not None else DEFAULT_ROLES
        user = User(
            username=request.username,
            password=self.hasher.hash(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
        )
        user.roles = self.role_registry.resolve_set(role_names)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            # Lost a race on the username unique constraint.
            self.session.rollback()
            raise UserAlreadyExistsError(request.username) from e

        logger.info("Created user", extra={"user_id": user.id, "username": user.username})
        return user

    def get_user_by_id(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_all_users(self) -> list[User]:
        return self.session.query(User).order_by(User.id).all()

    def update_user(self, user_id: int, request: UserChanges, acting_username: str) -> User:
        """Full update (PUT). Same semantics as partial_update_user."""
        return self._modify(user_id, request, acting_username)

    def partial_update_user(
        self, user_id: int, request: UserChanges, acting_username: str
    ) -> User:
        """Sparse update (PATCH): omitted fields stay unchanged."""
        return self._modify(user_id, request, acting_username)

    def _ensure_username_free(self, user: User, request: UserChanges) -> None:
        new_username = getattr(request, "username", None)
        if new_username is None or new_username == user.username:
            return
        if self._find_by_username(new_username) is not None:
            raise UserAlreadyExistsError(new_username)

    def _modify(self, user_id: int, request: UserChanges, acting_username: str) -> User:
        logger.info("Started update user", extra={"user_id": user_id, "actor": acting_username})

        try:
            user = self._find_for_update(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            self._authorize(user, acting_username)
            self._ensure_username_free(user, request)

            result = merge_user(user, request, self.hasher, self.role_registry)
            if not result.changed:
                # Nothing to write; end the transaction and release the row lock.
                self.session.rollback()
                logger.info("User unchanged", extra={"user_id": user_id})
                return self.get_user_by_id(user_id)

            self.session.commit()
        except IntegrityError as e:
            # Lost a race on the username unique constraint.
            self.session.rollback()
            raise UserAlreadyExistsError(getattr(request, "username", None) or "") from e
        except UserServiceError:
            self.session.rollback()
            raise

        logger.info(
            "Updated user",
            extra={"user_id": user_id, "changed_fields": result.changed_fields},
        )
        return user

    def delete_user(self, user_id: int, acting_username: str) -> None:
        """Delete the user if the actor is the owner or the admin."""
        logger.info("Started delete user", extra={"user_id": user_id, "actor": acting_username})

        try:
            user = self._find_for_update(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            self._authorize(user, acting_username)
        except UserServiceError:
            self.session.rollback()
            raise

        self.session.delete(user)
        self.session.commit()
        logger.info("Deleted user", extra={"user_id": user_id})
