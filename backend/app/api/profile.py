from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.user import (
    ExperienceCreate,
    PortfolioItemCreate,
    ProfileUpdate,
    RecentActivityCreate,
    user_to_public,
)
from ..services import profile_service
from ..utils.dependencies import CurrentUser
from ..utils.responses import success_response

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.put("/{user_id}")
def update_profile(user_id: int, payload: ProfileUpdate, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "update")
    user = profile_service.update_profile(db, user_id=user_id, patch=payload.model_dump(exclude_unset=True))
    return success_response(user_to_public(user), message="Profile updated successfully")


@router.post("/{user_id}/experience")
def add_experience(user_id: int, payload: ExperienceCreate, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "update")
    user = profile_service.add_experience(db, user_id=user_id, item=payload.model_dump())
    return success_response(user_to_public(user), message="Experience added successfully")


@router.delete("/{user_id}/experience/{experience_id}")
def remove_experience(user_id: int, experience_id: str, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "update")
    user = profile_service.remove_experience(db, user_id=user_id, experience_id=experience_id)
    return success_response(user_to_public(user), message="Experience removed successfully")


@router.post("/{user_id}/portfolio")
def add_portfolio_item(
    user_id: int,
    payload: PortfolioItemCreate,
    session: CurrentUser,
    db: Session = Depends(get_db),
):
    session.require_self(user_id, "update")
    user = profile_service.add_portfolio_item(db, user_id=user_id, item=payload.model_dump())
    return success_response(user_to_public(user), message="Portfolio item added successfully")


@router.delete("/{user_id}/portfolio/{item_id}")
def remove_portfolio_item(user_id: int, item_id: str, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "update")
    user = profile_service.remove_portfolio_item(db, user_id=user_id, item_id=item_id)
    return success_response(user_to_public(user), message="Portfolio item removed successfully")


@router.post("/{user_id}/recent-activity")
def add_recent_activity(
    user_id: int,
    payload: RecentActivityCreate,
    session: CurrentUser,
    db: Session = Depends(get_db),
):
    session.require_self(user_id, "update")
    user = profile_service.add_recent_activity(db, user_id=user_id, activity=payload.activity)
    return success_response(user_to_public(user), message="Activity added successfully")


@router.delete("/{user_id}/recent-activity/{activity_id}")
def remove_recent_activity(user_id: int, activity_id: str, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "update")
    user = profile_service.remove_recent_activity(db, user_id=user_id, activity_id=activity_id)
    return success_response(user_to_public(user), message="Activity removed successfully")


@router.post("/{user_id}/upload-image")
async def upload_image(
    user_id: int,
    session: CurrentUser,
    profileImage: UploadFile | None = File(default=None),  # noqa: N803 - multipart field name
    db: Session = Depends(get_db),
):
    session.require_self(user_id, "update")
    user = await profile_service.upload_profile_image(db, user_id=user_id, file=profileImage)
    return success_response(
        {"profileImage": user.profile_image, "user": user_to_public(user)},
        message="Profile image uploaded successfully",
    )


@router.delete("/{user_id}/delete-image")
def delete_image(user_id: int, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "update")
    user = profile_service.delete_profile_image(db, user_id=user_id)
    return success_response(user_to_public(user), message="Profile image deleted successfully")
