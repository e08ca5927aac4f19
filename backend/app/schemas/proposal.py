from pydantic import Field

from ..models.proposal import Proposal
from .base import CamelModel, iso


class ProposalCreate(CamelModel):
    job_id: int = Field(..., ge=1)
    rate: float = Field(..., gt=0)
    delivery_time: int = Field(..., ge=1)
    cover_letter: str = Field(..., min_length=1, max_length=10000)


class ProposalUpdate(CamelModel):
    rate: float | None = Field(default=None, gt=0)
    delivery_time: int | None = Field(default=None, ge=1)
    cover_letter: str | None = Field(default=None, min_length=1, max_length=10000)


def proposal_to_public(proposal: Proposal) -> dict:
    return {
        "id": proposal.id,
        "jobId": proposal.job_id,
        "freelancerId": proposal.freelancer_id,
        "freelancerName": proposal.freelancer_name,
        "rate": proposal.rate,
        "deliveryTime": proposal.delivery_time,
        "coverLetter": proposal.cover_letter,
        "status": proposal.status,
        "submittedAt": iso(proposal.submitted_at),
        "updatedAt": iso(proposal.updated_at),
    }
