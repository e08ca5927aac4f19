import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import transaction
from ..models.user import User
from ..repositories.user_repo import UserRepository
from ..utils.error_handlers import ConflictError, NotFoundError, ValidationError, get_error_message
from ..utils.security import hash_password
from ..utils.validation import (
    validate_email,
    validate_password,
    validate_string_field,
    validate_string_list,
)

logger = logging.getLogger(__name__)


def register_user(db: Session, *, full_name: str | None, email: str | None, password: str | None) -> User:
    problems: list[dict] = []
    checks = (
        ("fullName", lambda: validate_string_field(full_name, "Full name", max_length=255)),
        ("email", lambda: validate_email(email)),
        ("password", lambda: validate_password(password)),
    )
    cleaned: dict[str, Any] = {}
    for field, check in checks:
        try:
            cleaned[field] = check()
        except ValidationError as e:
            problems.extend(e.details or [{"field": field, "message": e.message}])
    if problems:
        raise ValidationError(problems[0]["message"], details=problems)

    users = UserRepository(db)
    if users.find_by_email(cleaned["email"]):
        raise ConflictError(get_error_message("email_exists"))

    try:
        with transaction(db):
            user = users.create(
                full_name=cleaned["fullName"],
                email=cleaned["email"],
                password=hash_password(password),
            )
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError(get_error_message("email_exists")) from None

    db.refresh(user)
    logger.info("User %s registered", user.id)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = UserRepository(db).find_by_id(user_id)
    if not user:
        raise NotFoundError(get_error_message("user_not_found"))
    return user


def list_users(db: Session) -> list[User]:
    return UserRepository(db).find_all()


def update_user(db: Session, *, user_id: int, patch: dict[str, Any]) -> User:
    """Shared by PUT and PATCH: only the keys present in `patch` change."""
    users = UserRepository(db)
    user = get_user(db, user_id)

    fields: dict[str, Any] = {}
    if patch.get("full_name") is not None:
        fields["full_name"] = validate_string_field(patch["full_name"], "Full name", max_length=255)
    if patch.get("email") is not None:
        email = validate_email(patch["email"])
        existing = users.find_by_email(email)
        if existing and existing.id != user.id:
            raise ConflictError(get_error_message("email_exists"))
        fields["email"] = email
    if patch.get("password") is not None:
        validate_password(patch["password"])
        fields["password"] = hash_password(patch["password"])
    if "profile_image" in patch:
        fields["profile_image"] = patch["profile_image"] or None
    if patch.get("bio") is not None:
        fields["bio"] = patch["bio"].strip()
    if patch.get("skills") is not None:
        fields["skills"] = validate_string_list(patch["skills"], "Skills")

    try:
        with transaction(db):
            users.update(user, fields)
    except IntegrityError:
        raise ConflictError(get_error_message("email_exists")) from None

    db.refresh(user)
    logger.info("User %s updated (%s)", user.id, ", ".join(sorted(fields)) or "no fields")
    return user


def delete_user(db: Session, *, user_id: int) -> bool:
    user = get_user(db, user_id)
    with transaction(db):
        UserRepository(db).delete(user)
    logger.info("User %s deleted", user_id)
    return True
