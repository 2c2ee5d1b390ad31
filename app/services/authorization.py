"""Owner/admin authorization decision for user record mutations."""

from dataclasses import dataclass

from app.services.errors import PreconditionFailedError


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of can_modify. Truthy when allowed; reason is set when denied."""

    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = AuthorizationDecision(allowed=True)


def can_modify(
    entity_owner_username: str | None,
    acting_username: str | None,
    admin_username: str | None,
) -> AuthorizationDecision:
    """
    Decide whether acting_username may modify or delete a record owned by
    entity_owner_username. The owner may act on their own record; the
    configured admin may act on any record.

    Pure function: no storage access.
    Raises PreconditionFailedError when owner or actor is empty.
    """
    if not entity_owner_username:
        raise PreconditionFailedError("Missing owner username for authorization check")
    if not acting_username:
        raise PreconditionFailedError("Missing logged user name for authorization check")

    if acting_username == entity_owner_username:
        return ALLOWED
    if admin_username and acting_username == admin_username:
        return ALLOWED
    return AuthorizationDecision(
        allowed=False,
        reason=(
            f"User '{acting_username}' is neither the owner '{entity_owner_username}' "
            "nor the admin; only admin or same user can modify"
        ),
    )
