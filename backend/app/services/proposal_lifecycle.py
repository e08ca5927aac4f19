"""
Proposal lifecycle.

    pending -> accepted | rejected | withdrawn

All three outcomes are terminal. Each mutating operation below runs in a single
database transaction; accepting a proposal additionally flips the job with a
compare-and-swap on `jobs.status`, so two clients racing to accept on the same
job cannot both win.
"""
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import transaction
from ..models.job import Job, JobStatus
from ..models.proposal import Proposal, ProposalStatus
from ..repositories.job_repo import JobRepository
from ..repositories.proposal_repo import ProposalRepository
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    get_error_message,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("rate", "delivery_time", "cover_letter")


def get_proposal(db: Session, proposal_id: int) -> Proposal:
    proposal = ProposalRepository(db).find_by_id(proposal_id)
    if not proposal:
        raise NotFoundError(get_error_message("proposal_not_found"))
    return proposal


def list_proposals_for_job(db: Session, job_id: int) -> list[Proposal]:
    return ProposalRepository(db).find_by_job_id(job_id)


def list_proposals_for_freelancer(db: Session, freelancer_id: int) -> list[Proposal]:
    return ProposalRepository(db).find_by_freelancer_id(freelancer_id)


def submit_proposal(
    db: Session,
    *,
    job_id: int,
    freelancer_id: int,
    freelancer_name: str,
    rate: float,
    delivery_time: int,
    cover_letter: str,
) -> Proposal:
    jobs = JobRepository(db)
    proposals = ProposalRepository(db)

    job = jobs.find_by_id(job_id)
    if not job:
        raise NotFoundError(get_error_message("job_not_found"))
    if job.status != JobStatus.OPEN.value:
        raise InvalidStateError(get_error_message("job_closed"))
    if job.client_id == int(freelancer_id):
        raise ForbiddenError(get_error_message("own_job_proposal"))

    try:
        with transaction(db):
            proposal = proposals.create(
                job_id=job.id,
                freelancer_id=int(freelancer_id),
                freelancer_name=freelancer_name,
                rate=float(rate),
                delivery_time=int(delivery_time),
                cover_letter=cover_letter.strip(),
                status=ProposalStatus.PENDING.value,
            )
            jobs.add_proposal(job, proposal.id)
    except IntegrityError:
        # Only uq_proposals_job_freelancer is a duplicate; a job deleted since the
        # checks above trips the foreign key instead.
        if not jobs.find_by_id(job_id):
            raise NotFoundError(get_error_message("job_not_found")) from None
        if proposals.find_by_job_and_freelancer(job_id, freelancer_id):
            raise ConflictError(get_error_message("already_proposed")) from None
        raise

    db.refresh(proposal)
    logger.info("Proposal %s submitted on job %s by freelancer %s", proposal.id, job.id, freelancer_id)
    return proposal


def _load_owned_pending(db: Session, proposal_id: int, freelancer_id: int, action: str) -> Proposal:
    proposal = get_proposal(db, proposal_id)
    if proposal.freelancer_id != int(freelancer_id):
        raise ForbiddenError(f"You can only {action} your own proposals")
    if proposal.status != ProposalStatus.PENDING.value:
        raise InvalidStateError(f"You can only {action} pending proposals")
    return proposal


def update_proposal(
    db: Session,
    *,
    proposal_id: int,
    patch: dict[str, Any],
    freelancer_id: int,
) -> Proposal:
    proposal = _load_owned_pending(db, proposal_id, freelancer_id, "update")

    fields = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS and v is not None}
    if "cover_letter" in fields:
        fields["cover_letter"] = fields["cover_letter"].strip()

    with transaction(db):
        ProposalRepository(db).update(proposal, fields)

    db.refresh(proposal)
    logger.info("Proposal %s updated (%s)", proposal.id, ", ".join(sorted(fields)) or "no fields")
    return proposal


def accept_proposal(db: Session, *, proposal_id: int, client_id: int) -> Proposal:
    """
    Accept one proposal: the proposal becomes accepted, the job moves to
    in-progress with `selected_proposal` set, and every other pending proposal on
    the job is rejected. Either all three writes land or none do.
    """
    jobs = JobRepository(db)
    proposals = ProposalRepository(db)

    proposal = get_proposal(db, proposal_id)
    job: Job | None = jobs.find_by_id(proposal.job_id)
    if not job or job.client_id != int(client_id):
        raise ForbiddenError("You can only accept proposals for your own jobs")
    if proposal.status != ProposalStatus.PENDING.value:
        raise InvalidStateError("Only pending proposals can be accepted")

    with transaction(db):
        proposals.update(proposal, {"status": ProposalStatus.ACCEPTED.value})
        if not jobs.mark_in_progress(job.id, proposal.id):
            raise InvalidStateError(get_error_message("job_closed"))
        rejected = proposals.reject_pending_for_job(job.id, exclude_id=proposal.id)

    db.refresh(proposal)
    logger.info(
        "Proposal %s accepted on job %s by client %s; %d sibling(s) rejected",
        proposal.id, job.id, client_id, rejected,
    )
    return proposal


def withdraw_proposal(db: Session, *, proposal_id: int, freelancer_id: int) -> bool:
    proposal = _load_owned_pending(db, proposal_id, freelancer_id, "withdraw")
    jobs = JobRepository(db)
    job_id = proposal.job_id

    with transaction(db):
        job = jobs.find_by_id(job_id)
        if job:
            jobs.remove_proposal(job, proposal.id)
        ProposalRepository(db).delete(proposal)

    logger.info("Proposal %s withdrawn from job %s", proposal_id, job_id)
    return True
