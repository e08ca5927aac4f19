"""Data access for jobs, including the job's proposal-id list."""
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..database import utcnow
from ..models.job import Job, JobStatus
from ..models.proposal import Proposal


class JobRepository:
    def __init__(self, db: Session):
        self.db = db

    def _newest_first(self, query):
        return query.order_by(Job.created_at.desc(), Job.id.desc())

    def find_all(self) -> list[Job]:
        return self._newest_first(self.db.query(Job)).all()

    def find_by_id(self, job_id: int) -> Job | None:
        return self.db.query(Job).filter(Job.id == int(job_id)).first()

    def find_by_category(self, category: str) -> list[Job]:
        return self._newest_first(self.db.query(Job).filter(Job.category == category)).all()

    def find_by_client_id(self, client_id: int) -> list[Job]:
        return self._newest_first(self.db.query(Job).filter(Job.client_id == int(client_id))).all()

    def create(self, **fields: Any) -> Job:
        job = Job(**fields)
        self.db.add(job)
        self.db.flush()
        return job

    def update(self, job: Job, fields: dict[str, Any]) -> Job:
        for key, value in fields.items():
            setattr(job, key, list(value) if isinstance(value, list) else value)
        job.updated_at = utcnow()
        self.db.flush()
        return job

    def delete(self, job: Job) -> None:
        # Proposals only reference the job by id; remove them explicitly so every engine agrees.
        self.db.query(Proposal).filter(Proposal.job_id == job.id).delete(synchronize_session=False)
        self.db.delete(job)
        self.db.flush()

    def add_proposal(self, job: Job, proposal_id: int) -> Job:
        ids = list(job.proposals or [])
        if proposal_id not in ids:
            ids.append(proposal_id)
        return self.update(job, {"proposals": ids})

    def remove_proposal(self, job: Job, proposal_id: int) -> Job:
        ids = [pid for pid in (job.proposals or []) if pid != proposal_id]
        return self.update(job, {"proposals": ids})

    def mark_in_progress(self, job_id: int, proposal_id: int) -> bool:
        """
        Compare-and-swap: select the proposal and move the job to in-progress only
        while it is still open. Returns False if another writer got there first.
        """
        result = self.db.execute(
            update(Job)
            .where(Job.id == int(job_id), Job.status == JobStatus.OPEN.value)
            .values(
                status=JobStatus.IN_PROGRESS.value,
                selected_proposal=int(proposal_id),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
