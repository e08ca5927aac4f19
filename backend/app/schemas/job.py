from datetime import datetime

from pydantic import Field

from ..models.job import Job
from .base import CamelModel, iso


class JobCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str
    budget: float = Field(..., ge=0)
    deadline: datetime
    requirements: list[str] = Field(default_factory=list)


class JobUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    category: str | None = None
    budget: float | None = Field(default=None, ge=0)
    deadline: datetime | None = None
    requirements: list[str] | None = None
    status: str | None = None


def job_to_public(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "category": job.category,
        "budget": job.budget,
        "deadline": iso(job.deadline),
        "requirements": list(job.requirements or []),
        "clientId": job.client_id,
        "clientName": job.client_name,
        "status": job.status,
        "proposals": list(job.proposals or []),
        "selectedProposal": job.selected_proposal,
        "createdAt": iso(job.created_at),
        "updatedAt": iso(job.updated_at),
    }
