"""
Centralized error handling and user-friendly error messages.

Services raise `AppError` subclasses; each carries a `kind` so clients can
branch on it programmatically instead of parsing message text.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""
    kind = "server_error"

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input."""
    kind = "validation_error"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=400, details=details)


class InvalidCredentialsError(AppError):
    """Login failed. Same message whether the email or the password was wrong."""
    kind = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password", details: Any = None):
        super().__init__(message, status_code=401, details=details)


class UnauthorizedError(AppError):
    """No usable credentials on the request."""
    kind = "unauthorized"

    def __init__(self, message: str = "Authentication required", details: Any = None):
        super().__init__(message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Ownership or authorization violation."""
    kind = "forbidden"

    def __init__(self, message: str = "Access forbidden", details: Any = None):
        super().__init__(message, status_code=403, details=details)


class NotFoundError(AppError):
    """Resource not found error."""
    kind = "not_found"

    def __init__(self, message: str = "Resource not found", details: Any = None):
        super().__init__(message, status_code=404, details=details)


class ConflictError(AppError):
    """Duplicate record (email, proposal per job)."""
    kind = "conflict"

    def __init__(self, message: str = "This record already exists", details: Any = None):
        super().__init__(message, status_code=409, details=details)


class InvalidStateError(AppError):
    """A status precondition failed (job not open, proposal not pending)."""
    kind = "invalid_state"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=409, details=details)


class FileUploadError(AppError):
    """File upload error."""
    kind = "file_upload_error"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=400, details=details)


class DatabaseError(AppError):
    """Database error."""
    kind = "database_error"

    def __init__(self, message: str = "Database operation failed", details: Any = None):
        super().__init__(message, status_code=500, details=details)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "email_exists": "User with this email already exists",
    "token_required": "Access token required",
    "token_invalid": "Invalid or expired token",

    # Users
    "user_not_found": "User not found",

    # Jobs
    "job_not_found": "Job not found",
    "job_closed": "This job is no longer accepting proposals",
    "own_job_proposal": "You cannot submit a proposal for your own job",

    # Proposals
    "proposal_not_found": "Proposal not found",
    "already_proposed": "You have already submitted a proposal for this job",

    # File uploads
    "no_image": "No image file provided",
    "file_too_large": "File is too large. Maximum size is 5MB.",
    "invalid_image_type": "Only image files are allowed!",

    # General
    "server_error": "Something went wrong on our end. Please try again later.",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def create_error_response(
    status_code: int,
    message: str,
    *,
    kind: str = "server_error",
    details: Any = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content = {
        "success": False,
        "error": message,
        "kind": kind,
    }

    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        details.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return details


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return create_error_response(exc.status_code, exc.message, kind=exc.kind, details=exc.details)


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTPException raised by the framework (404 routes, 405, ...)."""
    return create_error_response(exc.status_code, str(exc.detail), kind="http_error")


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Surface body/path validation failures field-by-field as a 400."""
    details = _validation_details(exc)
    logger.warning("%s %s validation failed: %s", request.method, request.url.path, details)
    return create_error_response(
        400,
        get_error_message("validation_error"),
        kind=ValidationError.kind,
        details=details,
    )


async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
    """Handle database operational errors."""
    logger.exception("Database OperationalError: %s", exc)
    return create_error_response(503, get_error_message("database_error"), kind=DatabaseError.kind)


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general database errors."""
    logger.exception("Database SQLAlchemyError: %s", exc)
    return create_error_response(500, get_error_message("database_error"), kind=DatabaseError.kind)


async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors globally."""
    logger.exception("Unhandled exception: %s", exc)
    return create_error_response(500, get_error_message("server_error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(OperationalError, sqlalchemy_operational_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
