"""HTTP Basic authentication dependency (get_current_user)."""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import verify_password
from app.models import User
from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)
security = HTTPBasic(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


def _is_admin_login(credentials: HTTPBasicCredentials) -> bool:
    settings = get_settings()
    return secrets.compare_digest(
        credentials.username.encode("utf-8"),
        settings.ADMIN_USERNAME.encode("utf-8"),
    )


def _admin_password_matches(credentials: HTTPBasicCredentials) -> bool:
    settings = get_settings()
    return secrets.compare_digest(
        credentials.password.encode("utf-8"),
        settings.ADMIN_PASSWORD.get_secret_value().encode("utf-8"),
    )


def get_current_user(
    credentials: Annotated[HTTPBasicCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require valid Basic credentials and return the principal.

    The configured admin authenticates against settings; everyone else
    against their stored bcrypt hash. Raises 401 if missing or invalid.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    if _is_admin_login(credentials):
        if not _admin_password_matches(credentials):
            logger.info("Admin authentication failed")
            raise _unauthorized("Invalid username or password.")
        return CurrentUser(username=credentials.username, is_admin=True)

    user = db.query(User).filter(User.username == credentials.username).first()
    if user is None or not verify_password(credentials.password, user.password):
        logger.info("Authentication failed", extra={"username": credentials.username})
        raise _unauthorized("Invalid username or password.")
    return CurrentUser(id=user.id, username=user.username, is_admin=False)
