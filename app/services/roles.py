"""Role registry: find-or-create of stored roles, one row per RoleKind."""

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Role, RoleKind
from app.services.errors import InvalidRoleKindError

logger = logging.getLogger(__name__)


def parse_role_kind(role_name: RoleKind | str) -> RoleKind:
    """Return the RoleKind for role_name or raise InvalidRoleKindError."""
    if isinstance(role_name, RoleKind):
        return role_name
    if not isinstance(role_name, str):
        raise InvalidRoleKindError(role_name)
    try:
        return RoleKind(role_name.strip())
    except ValueError as e:
        raise InvalidRoleKindError(role_name) from e


class RoleRegistry:
    """
    Resolves role names to stored Role rows, creating missing ones.

    The unique constraint on role.name is the source of truth. A concurrent
    first use of the same role makes our insert fail; the insert runs in a
    SAVEPOINT so only that statement is rolled back, then the lookup is
    retried once.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _find(self, kind: RoleKind) -> Role | None:
        return self.session.query(Role).filter(Role.name == kind).first()

    def resolve_or_create(self, role_name: RoleKind | str) -> Role:
        kind = parse_role_kind(role_name)
        role = self._find(kind)
        if role is not None:
            return role

        try:
            with self.session.begin_nested():
                role = Role(name=kind, description=kind.description)
                self.session.add(role)
        except IntegrityError:
            logger.info("Role %s created concurrently; re-reading", kind.value)
            role = self._find(kind)
            if role is None:
                raise
            return role

        logger.info("Created role", extra={"role": kind.value, "role_id": role.id})
        return role

    def resolve_set(self, role_names: Iterable[RoleKind | str] | None) -> set[Role]:
        """Resolve every name; None or empty input yields an empty set."""
        if not role_names:
            return set()
        kinds = {parse_role_kind(name) for name in role_names}
        return {self.resolve_or_create(kind) for kind in kinds}
