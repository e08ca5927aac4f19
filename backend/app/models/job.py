import enum

from sqlalchemy import JSON, Column, DateTime, Float, Index, Integer, String, Text

from ..database import Base, utcnow


class JobCategory(str, enum.Enum):
    WORD_PROCESSING = "word-processing"
    EXCEL_DATA_ENTRY = "excel-data-entry"
    DESIGN = "design"
    TYPESETTING = "typesetting"


# Listing filter only; never stored on a job.
ALL_JOBS_FILTER = "all-jobs"


class JobStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(40), nullable=False, index=True)
    budget = Column(Float, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    requirements = Column(JSON, nullable=False, default=list)

    # Owning client, denormalized at creation time.
    client_id = Column(Integer, nullable=False, index=True)
    client_name = Column(String(255), nullable=False)

    # Lifecycle: open -> in-progress (on acceptance) -> completed | cancelled
    status = Column(String(20), nullable=False, default=JobStatus.OPEN.value, index=True)
    proposals = Column(JSON, nullable=False, default=list)  # proposal ids, weak references
    selected_proposal = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, status={self.status}, client={self.client_id})>"
