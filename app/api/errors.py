"""Map user service errors to application/problem+json responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.services.errors import (
    InvalidRoleKindError,
    PreconditionFailedError,
    UserAccessDeniedError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserServiceError,
)

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

STATUS_BY_ERROR: dict[type[UserServiceError], int] = {
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    UserAlreadyExistsError: status.HTTP_409_CONFLICT,
    UserAccessDeniedError: status.HTTP_403_FORBIDDEN,
    InvalidRoleKindError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PreconditionFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

TITLE_BY_STATUS: dict[int, str] = {
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_409_CONFLICT: "Conflict",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def status_for_error(exc: UserServiceError) -> int:
    """HTTP status for exc, looked up along its class hierarchy; 500 if unmapped."""
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def problem_response(request: Request, status_code: int, detail: str) -> JSONResponse:
    """Build an RFC 7807 problem body for the request."""
    return JSONResponse(
        status_code=status_code,
        media_type=PROBLEM_MEDIA_TYPE,
        content={
            "type": "about:blank",
            "title": TITLE_BY_STATUS.get(status_code, "Error"),
            "status": status_code,
            "detail": detail,
            "instance": request.url.path,
        },
    )


async def user_service_error_handler(request: Request, exc: UserServiceError) -> JSONResponse:
    status_code = status_for_error(exc)
    if status_code >= 500:
        # Should be unreachable: the auth dependency always supplies a principal.
        logger.error("User service failure: %s", exc.message)
        return problem_response(request, status_code, "Server error")
    logger.info("User service error %s: %s", status_code, exc.message)
    return problem_response(request, status_code, exc.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserServiceError, user_service_error_handler)
