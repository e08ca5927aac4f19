from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text

from ..database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash, never exposed
    profile_image = Column(String(500), nullable=True)  # /uploads/profile-images/<file>
    bio = Column(Text, nullable=False, default="")
    skills = Column(JSON, nullable=False, default=list)

    # Embedded sub-lists, owned exclusively by this user. Each item carries its own "id".
    experience = Column(JSON, nullable=False, default=list)
    portfolio = Column(JSON, nullable=False, default=list)
    recent_activity = Column(JSON, nullable=False, default=list)  # newest-first

    rating = Column(Float, nullable=False, default=0)
    completed_jobs = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
