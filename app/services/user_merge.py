"""Field-level merge of an update request into a stored user."""

from dataclasses import dataclass, field
from typing import Protocol

from app.core.security import PasswordHasher
from app.models import User
from app.services.roles import RoleRegistry

# Plain attributes merged with "set only if present and different".
# id is deliberately absent: it is never mergeable.
MERGEABLE_FIELDS = ("username", "first_name", "last_name")


class UserChanges(Protocol):
    """Anything carrying optional user fields; None means "leave unchanged"."""

    username: str | None
    password: str | None
    first_name: str | None
    last_name: str | None


@dataclass
class MergeResult:
    """Merged user plus the names of the fields that actually changed."""

    user: User
    changed_fields: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changed_fields)


def _merge_password(existing: User, plain: str, hasher: PasswordHasher) -> bool:
    # Stored value is a hash: resubmitting the current password must not count as a change.
    if hasher.matches(plain, existing.password):
        return False
    existing.password = hasher.hash(plain)
    return True


def _merge_roles(existing: User, role_names, role_registry: RoleRegistry) -> bool:
    resolved = role_registry.resolve_set(role_names)
    current = {role.name for role in existing.roles}
    if {role.name for role in resolved} == current:
        return False
    # Replace, not union: the request is the source of truth for current roles.
    existing.roles = resolved
    return True


def merge_user(
    existing: User,
    incoming: UserChanges,
    hasher: PasswordHasher,
    role_registry: RoleRegistry,
) -> MergeResult:
    """
    Apply incoming onto existing in place and report what changed.

    Absent (None) fields are left untouched; fields equal to the stored value
    are no-ops. A present roles set fully replaces the stored roles.
    """
    result = MergeResult(user=existing)

    for name in MERGEABLE_FIELDS:
        value = getattr(incoming, name, None)
        if value is None or value == getattr(existing, name):
            continue
        setattr(existing, name, value)
        result.changed_fields.append(name)

    password = getattr(incoming, "password", None)
    if password is not None and _merge_password(existing, password, hasher):
        result.changed_fields.append("password")

    role_names = getattr(incoming, "roles", None)
    if role_names is not None and _merge_roles(existing, role_names, role_registry):
        result.changed_fields.append("roles")

    return result
