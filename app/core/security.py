"""Password hashing for stored credentials."""

import bcrypt

from app.core.config import settings

# Min/max lengths for username and password validation (input validation).
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"
# bcrypt only considers the first 72 bytes of a password.
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 72
NAME_MAX_LEN = 100


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class PasswordHasher:
    """
    One-way hash used by the user service.

    Wraps hash_password/verify_password so the cost can be injected
    (tests use the bcrypt minimum of 4 rounds).
    """

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        return hash_password(plain_password, rounds=self.rounds)

    def matches(self, plain_password: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        return verify_password(plain_password, hashed)
