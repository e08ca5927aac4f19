"""
Profile sub-collections: experience, portfolio and recent activity.

Items live as JSON lists on the user row. Each item gets its own id so it can be
removed individually; removing an unknown id leaves the list unchanged.
"""
import logging
from typing import Any
from uuid import uuid4

from fastapi import UploadFile
from sqlalchemy.orm import Session

from ..config import RECENT_ACTIVITY_LIMIT
from ..database import transaction, utcnow
from ..models.user import User
from ..repositories.user_repo import UserRepository
from ..utils.validation import validate_string_field, validate_string_list
from . import image_storage
from .user_service import get_user

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def _save(db: Session, user: User, fields: dict[str, Any]) -> User:
    with transaction(db):
        UserRepository(db).update(user, fields)
    db.refresh(user)
    return user


def update_profile(db: Session, *, user_id: int, patch: dict[str, Any]) -> User:
    user = get_user(db, user_id)

    fields: dict[str, Any] = {}
    if patch.get("full_name") is not None:
        fields["full_name"] = validate_string_field(patch["full_name"], "Full name", max_length=255)
    if patch.get("bio") is not None:
        fields["bio"] = patch["bio"].strip()
    if patch.get("skills") is not None:
        fields["skills"] = validate_string_list(patch["skills"], "Skills")
    if "profile_image" in patch:
        fields["profile_image"] = patch["profile_image"] or None

    user = _save(db, user, fields)
    logger.info("Profile %s updated (%s)", user.id, ", ".join(sorted(fields)) or "no fields")
    return user


def add_experience(db: Session, *, user_id: int, item: dict[str, Any]) -> User:
    user = get_user(db, user_id)
    entry = {
        "id": _new_id(),
        "title": validate_string_field(item.get("title"), "Title", max_length=200),
        "company": validate_string_field(item.get("company"), "Company", max_length=200),
        "start_date": _iso(item.get("start_date")),
        "end_date": _iso(item.get("end_date")),
        "description": (item.get("description") or "").strip(),
        "current": bool(item.get("current")),
    }
    return _save(db, user, {"experience": [*(user.experience or []), entry]})


def remove_experience(db: Session, *, user_id: int, experience_id: str) -> User:
    user = get_user(db, user_id)
    kept = [e for e in (user.experience or []) if e.get("id") != experience_id]
    return _save(db, user, {"experience": kept})


def add_portfolio_item(db: Session, *, user_id: int, item: dict[str, Any]) -> User:
    user = get_user(db, user_id)
    entry = {
        "id": _new_id(),
        "title": validate_string_field(item.get("title"), "Title", max_length=200),
        "description": validate_string_field(item.get("description"), "Description", max_length=5000),
        "category": validate_string_field(item.get("category"), "Category", max_length=100),
        "file_url": item.get("file_url") or None,
        "created_at": utcnow().isoformat(),
    }
    return _save(db, user, {"portfolio": [*(user.portfolio or []), entry]})


def remove_portfolio_item(db: Session, *, user_id: int, item_id: str) -> User:
    user = get_user(db, user_id)
    kept = [p for p in (user.portfolio or []) if p.get("id") != item_id]
    return _save(db, user, {"portfolio": kept})


def add_recent_activity(db: Session, *, user_id: int, activity: str) -> User:
    """Newest entry first; the list is capped at RECENT_ACTIVITY_LIMIT."""
    user = get_user(db, user_id)
    entry = {
        "id": _new_id(),
        "activity": validate_string_field(activity, "Activity", max_length=500),
        "timestamp": utcnow().isoformat(),
    }
    activities = [entry, *(user.recent_activity or [])][:RECENT_ACTIVITY_LIMIT]
    return _save(db, user, {"recent_activity": activities})


def remove_recent_activity(db: Session, *, user_id: int, activity_id: str) -> User:
    user = get_user(db, user_id)
    kept = [a for a in (user.recent_activity or []) if a.get("id") != activity_id]
    return _save(db, user, {"recent_activity": kept})


async def upload_profile_image(db: Session, *, user_id: int, file: UploadFile | None) -> User:
    user = get_user(db, user_id)
    previous = user.profile_image

    url = await image_storage.store_profile_image(file, user_id=user.id)
    try:
        user = _save(db, user, {"profile_image": url})
    except Exception:
        image_storage.delete_profile_image(url)
        raise

    if previous and previous != url:
        image_storage.delete_profile_image(previous)
    logger.info("Profile image for user %s set to %s", user.id, url)
    return user


def delete_profile_image(db: Session, *, user_id: int) -> User:
    user = get_user(db, user_id)
    previous = user.profile_image

    user = _save(db, user, {"profile_image": None})
    if previous:
        image_storage.delete_profile_image(previous)
    logger.info("Profile image removed for user %s", user.id)
    return user
