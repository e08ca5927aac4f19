import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from ..database import transaction
from ..models.job import ALL_JOBS_FILTER, Job, JobStatus
from ..repositories.job_repo import JobRepository
from ..utils.error_handlers import ForbiddenError, InvalidStateError, NotFoundError, get_error_message
from ..utils.validation import (
    validate_category,
    validate_job_status,
    validate_string_field,
    validate_string_list,
)

logger = logging.getLogger(__name__)

# open -> in-progress only happens through accepting a proposal.
CLIENT_SETTABLE_STATUSES = (JobStatus.COMPLETED.value, JobStatus.CANCELLED.value)


def create_job(
    db: Session,
    *,
    client_id: int,
    client_name: str,
    title: str,
    description: str,
    category: str,
    budget: float,
    deadline: datetime,
    requirements: list[str] | None = None,
) -> Job:
    fields = {
        "title": validate_string_field(title, "Title", max_length=200),
        "description": validate_string_field(description, "Description", max_length=20000),
        "category": validate_category(category),
        "budget": float(budget),
        "deadline": deadline,
        "requirements": validate_string_list(requirements, "Requirements"),
        "client_id": int(client_id),
        "client_name": client_name,
        "status": JobStatus.OPEN.value,
        "proposals": [],
        "selected_proposal": None,
    }
    with transaction(db):
        job = JobRepository(db).create(**fields)

    db.refresh(job)
    logger.info("Job %s created by client %s (%s)", job.id, client_id, job.category)
    return job


def list_jobs(db: Session) -> list[Job]:
    return JobRepository(db).find_all()


def get_job(db: Session, job_id: int) -> Job:
    job = JobRepository(db).find_by_id(job_id)
    if not job:
        raise NotFoundError(get_error_message("job_not_found"))
    return job


def list_jobs_by_category(db: Session, category: str) -> list[Job]:
    category = validate_category(category, allow_filter=True)
    if category == ALL_JOBS_FILTER:
        return JobRepository(db).find_all()
    return JobRepository(db).find_by_category(category)


def list_jobs_by_client(db: Session, client_id: int) -> list[Job]:
    return JobRepository(db).find_by_client_id(client_id)


def _owned_job(db: Session, job_id: int, client_id: int, action: str) -> Job:
    job = get_job(db, job_id)
    if job.client_id != int(client_id):
        raise ForbiddenError(f"You can only {action} your own jobs")
    return job


def update_job(db: Session, *, job_id: int, patch: dict[str, Any], client_id: int) -> Job:
    """
    Owner-only field update. `proposals` and `selected_proposal` are never taken
    from the patch; they only move through the proposal lifecycle. The owner may
    close a job as completed or cancelled; reopening it or moving it to
    in-progress by hand is an InvalidStateError.
    """
    job = _owned_job(db, job_id, client_id, "update")

    fields: dict[str, Any] = {}
    if patch.get("title") is not None:
        fields["title"] = validate_string_field(patch["title"], "Title", max_length=200)
    if patch.get("description") is not None:
        fields["description"] = validate_string_field(patch["description"], "Description", max_length=20000)
    if patch.get("category") is not None:
        fields["category"] = validate_category(patch["category"])
    if patch.get("budget") is not None:
        fields["budget"] = float(patch["budget"])
    if patch.get("deadline") is not None:
        fields["deadline"] = patch["deadline"]
    if patch.get("requirements") is not None:
        fields["requirements"] = validate_string_list(patch["requirements"], "Requirements")
    if patch.get("status") is not None:
        status = validate_job_status(patch["status"])
        if status not in CLIENT_SETTABLE_STATUSES:
            raise InvalidStateError("Job status can only be changed to completed or cancelled")
        fields["status"] = status

    with transaction(db):
        JobRepository(db).update(job, fields)

    db.refresh(job)
    if "status" in fields:
        logger.info("Job %s status set to %s by client %s", job.id, job.status, client_id)
    return job


def delete_job(db: Session, *, job_id: int, client_id: int) -> bool:
    job = _owned_job(db, job_id, client_id, "delete")
    with transaction(db):
        JobRepository(db).delete(job)
    logger.info("Job %s deleted by client %s", job_id, client_id)
    return True
