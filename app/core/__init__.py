"""Core app configuration, database and password hashing."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.security import PasswordHasher

__all__ = ["get_settings", "settings", "get_db", "PasswordHasher"]
