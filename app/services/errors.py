"""Typed outcomes raised by the user service. Messages never contain passwords."""


class UserServiceError(Exception):
    """Base class for user service failures reported to the caller."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    """Raised when no user record exists for the requested id."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User not found with given id {user_id}")


class UserAlreadyExistsError(UserServiceError):
    """Raised when the username is already taken."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"User already registered with given username {username}")


class UserAccessDeniedError(UserServiceError):
    """Raised when the acting principal is neither the record owner nor the admin."""

    def __init__(self, owner: str, actor: str, reason: str | None = None) -> None:
        self.owner = owner
        self.actor = actor
        super().__init__(reason or "Only admin or same user can modify this user")


class InvalidRoleKindError(UserServiceError):
    """Raised when a role name is not one of the known role kinds."""

    def __init__(self, role_name: object) -> None:
        self.role_name = role_name
        super().__init__(f"Unknown role: {role_name!r}")


class PreconditionFailedError(UserServiceError):
    """
    Raised when the owner or acting username is missing.

    Indicates the authentication boundary handed over a malformed principal;
    unreachable in a correctly wired deployment.
    """
