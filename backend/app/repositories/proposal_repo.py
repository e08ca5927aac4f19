"""Data access for proposals."""
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..database import utcnow
from ..models.proposal import Proposal, ProposalStatus


class ProposalRepository:
    def __init__(self, db: Session):
        self.db = db

    def _newest_first(self, query):
        return query.order_by(Proposal.submitted_at.desc(), Proposal.id.desc())

    def find_by_id(self, proposal_id: int) -> Proposal | None:
        return self.db.query(Proposal).filter(Proposal.id == int(proposal_id)).first()

    def find_by_job_id(self, job_id: int) -> list[Proposal]:
        return self._newest_first(self.db.query(Proposal).filter(Proposal.job_id == int(job_id))).all()

    def find_by_freelancer_id(self, freelancer_id: int) -> list[Proposal]:
        return self._newest_first(
            self.db.query(Proposal).filter(Proposal.freelancer_id == int(freelancer_id))
        ).all()

    def find_by_job_and_freelancer(self, job_id: int, freelancer_id: int) -> Proposal | None:
        return (
            self.db.query(Proposal)
            .filter(Proposal.job_id == int(job_id), Proposal.freelancer_id == int(freelancer_id))
            .first()
        )

    def create(self, **fields: Any) -> Proposal:
        """Raises IntegrityError when (job_id, freelancer_id) already exists."""
        proposal = Proposal(**fields)
        self.db.add(proposal)
        self.db.flush()
        return proposal

    def update(self, proposal: Proposal, fields: dict[str, Any]) -> Proposal:
        for key, value in fields.items():
            setattr(proposal, key, value)
        proposal.updated_at = utcnow()
        self.db.flush()
        return proposal

    def delete(self, proposal: Proposal) -> None:
        self.db.delete(proposal)
        self.db.flush()

    def reject_pending_for_job(self, job_id: int, *, exclude_id: int) -> int:
        """Reject every still-pending sibling; withdrawn/rejected rows are left alone."""
        result = self.db.execute(
            update(Proposal)
            .where(
                Proposal.job_id == int(job_id),
                Proposal.id != int(exclude_id),
                Proposal.status == ProposalStatus.PENDING.value,
            )
            .values(status=ProposalStatus.REJECTED.value, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
