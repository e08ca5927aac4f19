import enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint

from ..database import Base, utcnow


class ProposalStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Proposal(Base):
    __tablename__ = "proposals"
    __table_args__ = (
        # One proposal per freelancer per job.
        UniqueConstraint("job_id", "freelancer_id", name="uq_proposals_job_freelancer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(Integer, nullable=False, index=True)
    freelancer_name = Column(String(255), nullable=False)
    rate = Column(Float, nullable=False)
    delivery_time = Column(Integer, nullable=False)  # days
    cover_letter = Column(Text, nullable=False)

    # pending -> accepted | rejected | withdrawn (all terminal)
    status = Column(String(20), nullable=False, default=ProposalStatus.PENDING.value, index=True)
    submitted_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Proposal(id={self.id}, job={self.job_id}, freelancer={self.freelancer_id}, status={self.status})>"
