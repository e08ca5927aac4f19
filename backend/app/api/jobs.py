from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.job import JobCreate, JobUpdate, job_to_public
from ..services import job_lifecycle
from ..services.user_service import get_user
from ..utils.dependencies import CurrentUser
from ..utils.responses import success_response

router = APIRouter(tags=["Jobs"])


@router.post("/jobs", status_code=201)
def create_job(payload: JobCreate, session: CurrentUser, db: Session = Depends(get_db)):
    client = get_user(db, session.user_id)
    job = job_lifecycle.create_job(
        db,
        client_id=client.id,
        client_name=client.full_name,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        budget=payload.budget,
        deadline=payload.deadline,
        requirements=payload.requirements,
    )
    return success_response(job_to_public(job), message="Job created successfully")


@router.get("/jobs")
def list_jobs(db: Session = Depends(get_db)):
    return success_response([job_to_public(j) for j in job_lifecycle.list_jobs(db)])


@router.get("/jobs/category/{category}")
def list_jobs_by_category(category: str, db: Session = Depends(get_db)):
    jobs = job_lifecycle.list_jobs_by_category(db, category)
    return success_response([job_to_public(j) for j in jobs])


@router.get("/jobs/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    return success_response(job_to_public(job_lifecycle.get_job(db, job_id)))


@router.put("/jobs/{job_id}")
def update_job(job_id: int, payload: JobUpdate, session: CurrentUser, db: Session = Depends(get_db)):
    job = job_lifecycle.update_job(
        db,
        job_id=job_id,
        patch=payload.model_dump(exclude_unset=True),
        client_id=session.user_id,
    )
    return success_response(job_to_public(job), message="Job updated successfully")


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, session: CurrentUser, db: Session = Depends(get_db)):
    job_lifecycle.delete_job(db, job_id=job_id, client_id=session.user_id)
    return success_response(message="Job deleted successfully")


@router.get("/my-jobs")
def my_jobs(session: CurrentUser, db: Session = Depends(get_db)):
    jobs = job_lifecycle.list_jobs_by_client(db, session.user_id)
    return success_response([job_to_public(j) for j in jobs])
