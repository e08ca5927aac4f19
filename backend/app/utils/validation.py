"""
Validation utilities for input validation and error handling.
"""
import re
from typing import Any

from ..models.job import ALL_JOBS_FILTER, JobCategory, JobStatus
from .error_handlers import ValidationError


def validate_email(email: str) -> str:
    """Validate email format."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required", details=[{"field": "email", "message": "Email is required"}])

    email = email.strip().lower()
    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    # Basic email regex
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    if not re.match(pattern, email):
        raise ValidationError("Valid email is required", details=[{"field": "email", "message": "Valid email is required"}])

    return email


_PASSWORD_RULES = (
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"[0-9]", "Password must contain at least one number"),
    (r"[^A-Za-z0-9]", "Password must contain at least one special character"),
)


def validate_password(password: str) -> None:
    """Validate password strength. All failing rules are reported together."""
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required", details=[{"field": "password", "message": "Password is required"}])

    if len(password) > 128:
        raise ValidationError("Password too long (max 128 characters)")

    problems = []
    if len(password) < 6:
        problems.append("Password must be at least 6 characters")
    for pattern, message in _PASSWORD_RULES:
        if not re.search(pattern, password):
            problems.append(message)

    if problems:
        raise ValidationError(
            problems[0],
            details=[{"field": "password", "message": m} for m in problems],
        )


def validate_string_field(
    value: Any,
    field_name: str,
    min_length: int = 1,
    max_length: int = 1000,
    required: bool = True,
) -> str | None:
    """Validate a string field with common rules."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    value = value.strip()

    if required and not value:
        raise ValidationError(f"{field_name} is required")

    if len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(value) > max_length:
        raise ValidationError(f"{field_name} must not exceed {max_length} characters")

    return value


def validate_string_list(value: Any, field_name: str, max_items: int = 100) -> list[str]:
    """Trim entries, drop blanks, keep order."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{field_name} must be a list")
    cleaned = [str(x).strip() for x in value if str(x).strip()]
    if len(cleaned) > max_items:
        raise ValidationError(f"{field_name} must not exceed {max_items} entries")
    return cleaned


def validate_category(category: str | None, *, allow_filter: bool = False) -> str:
    """Validate a job category. `all-jobs` is only meaningful as a listing filter."""
    if not category or not isinstance(category, str):
        raise ValidationError("Category is required")

    category = category.strip().lower()
    valid = {c.value for c in JobCategory}
    if allow_filter:
        valid.add(ALL_JOBS_FILTER)

    if category not in valid:
        raise ValidationError(f"Invalid category. Must be one of: {', '.join(sorted(valid))}")

    return category


def validate_job_status(status: str | None) -> str:
    """Validate job status. An empty value is rejected, not defaulted."""
    if not status or not isinstance(status, str) or not status.strip():
        raise ValidationError("Status is required", details=[{"field": "status", "message": "Status is required"}])

    status = status.strip().lower()
    valid_statuses = {s.value for s in JobStatus}

    if status not in valid_statuses:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(sorted(valid_statuses))}")

    return status


def sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent directory traversal and other attacks."""
    if not filename:
        raise ValidationError("Filename is required")

    # Remove any path separators
    filename = filename.replace("/", "_").replace("\\", "_")

    # Remove any null bytes
    filename = filename.replace("\x00", "")

    # Remove directory traversal sequences
    filename = filename.replace("..", "_")

    # Remove leading dots to prevent hidden files
    filename = filename.lstrip(".")

    if len(filename) > 255:
        raise ValidationError("Filename too long")

    if not filename or filename == "_":
        raise ValidationError("Invalid filename")

    return filename
