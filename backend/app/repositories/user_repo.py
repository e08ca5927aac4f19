"""Data access for users. No business rules live here."""
from typing import Any

from sqlalchemy.orm import Session

from ..database import utcnow
from ..models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == int(user_id)).first()

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, *, full_name: str, email: str, password: str) -> User:
        user = User(
            full_name=full_name,
            email=email,
            password=password,
            bio="",
            skills=[],
            experience=[],
            portfolio=[],
            recent_activity=[],
        )
        self.db.add(user)
        self.db.flush()
        return user

    def update(self, user: User, fields: dict[str, Any]) -> User:
        # JSON columns must be reassigned (not mutated in place) for the change to be tracked.
        for key, value in fields.items():
            setattr(user, key, list(value) if isinstance(value, list) else value)
        user.updated_at = utcnow()
        self.db.flush()
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.flush()
