from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.proposal import ProposalCreate, ProposalUpdate, proposal_to_public
from ..services import proposal_lifecycle
from ..services.user_service import get_user
from ..utils.dependencies import CurrentUser
from ..utils.responses import success_response

router = APIRouter(tags=["Proposals"])


@router.post("/proposals", status_code=201)
def submit_proposal(payload: ProposalCreate, session: CurrentUser, db: Session = Depends(get_db)):
    freelancer = get_user(db, session.user_id)
    proposal = proposal_lifecycle.submit_proposal(
        db,
        job_id=payload.job_id,
        freelancer_id=freelancer.id,
        freelancer_name=freelancer.full_name,
        rate=payload.rate,
        delivery_time=payload.delivery_time,
        cover_letter=payload.cover_letter,
    )
    return success_response(proposal_to_public(proposal), message="Proposal submitted successfully")


@router.get("/proposals/job/{job_id}")
def list_job_proposals(job_id: int, db: Session = Depends(get_db)):
    proposals = proposal_lifecycle.list_proposals_for_job(db, job_id)
    return success_response([proposal_to_public(p) for p in proposals])


@router.get("/proposals/{proposal_id}")
def get_proposal(proposal_id: int, db: Session = Depends(get_db)):
    return success_response(proposal_to_public(proposal_lifecycle.get_proposal(db, proposal_id)))


@router.get("/my-proposals")
def my_proposals(session: CurrentUser, db: Session = Depends(get_db)):
    proposals = proposal_lifecycle.list_proposals_for_freelancer(db, session.user_id)
    return success_response([proposal_to_public(p) for p in proposals])


@router.put("/proposals/{proposal_id}")
def update_proposal(
    proposal_id: int,
    payload: ProposalUpdate,
    session: CurrentUser,
    db: Session = Depends(get_db),
):
    proposal = proposal_lifecycle.update_proposal(
        db,
        proposal_id=proposal_id,
        patch=payload.model_dump(exclude_unset=True),
        freelancer_id=session.user_id,
    )
    return success_response(proposal_to_public(proposal), message="Proposal updated successfully")


@router.post("/proposals/{proposal_id}/accept")
def accept_proposal(proposal_id: int, session: CurrentUser, db: Session = Depends(get_db)):
    proposal = proposal_lifecycle.accept_proposal(db, proposal_id=proposal_id, client_id=session.user_id)
    return success_response(proposal_to_public(proposal), message="Proposal accepted successfully")


@router.delete("/proposals/{proposal_id}")
def withdraw_proposal(proposal_id: int, session: CurrentUser, db: Session = Depends(get_db)):
    proposal_lifecycle.withdraw_proposal(db, proposal_id=proposal_id, freelancer_id=session.user_id)
    return success_response(message="Proposal withdrawn successfully")
