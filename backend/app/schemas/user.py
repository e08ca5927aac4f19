from datetime import datetime

from pydantic import Field

from ..models.user import User
from .base import CamelModel, iso


class UserCreate(CamelModel):
    full_name: str | None = None
    email: str | None = None
    password: str | None = None


class UserUpdate(CamelModel):
    full_name: str | None = Field(default=None, max_length=255)
    email: str | None = None
    password: str | None = None
    profile_image: str | None = None
    bio: str | None = Field(default=None, max_length=5000)
    skills: list[str] | None = None


class LoginRequest(CamelModel):
    email: str
    password: str


class ProfileUpdate(CamelModel):
    full_name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)
    skills: list[str] | None = None
    profile_image: str | None = None


class ExperienceCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    start_date: datetime
    end_date: datetime | None = None
    description: str = Field(default="", max_length=5000)
    current: bool = False


class PortfolioItemCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    category: str = Field(..., min_length=1, max_length=100)
    file_url: str | None = Field(default=None, max_length=500)


class RecentActivityCreate(CamelModel):
    activity: str = Field(..., min_length=1, max_length=500)


def _experience_to_public(item: dict) -> dict:
    return {
        "id": item.get("id"),
        "title": item.get("title"),
        "company": item.get("company"),
        "startDate": item.get("start_date"),
        "endDate": item.get("end_date"),
        "description": item.get("description") or "",
        "current": bool(item.get("current")),
    }


def _portfolio_item_to_public(item: dict) -> dict:
    return {
        "id": item.get("id"),
        "title": item.get("title"),
        "description": item.get("description"),
        "category": item.get("category"),
        "fileUrl": item.get("file_url"),
        "createdAt": item.get("created_at"),
    }


def _activity_to_public(item: dict) -> dict:
    return {
        "id": item.get("id"),
        "activity": item.get("activity"),
        "timestamp": item.get("timestamp"),
    }


def user_to_public(user: User) -> dict:
    # Password hash never leaves the service.
    return {
        "id": user.id,
        "fullName": user.full_name,
        "email": user.email,
        "profileImage": user.profile_image,
        "bio": user.bio or "",
        "skills": list(user.skills or []),
        "experience": [_experience_to_public(e) for e in (user.experience or [])],
        "portfolio": [_portfolio_item_to_public(p) for p in (user.portfolio or [])],
        "recentActivity": [_activity_to_public(a) for a in (user.recent_activity or [])],
        "rating": user.rating or 0,
        "completedJobs": user.completed_jobs or 0,
        "createdAt": iso(user.created_at),
        "updatedAt": iso(user.updated_at),
    }
