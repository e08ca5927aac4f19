from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.user import UserCreate, UserUpdate, user_to_public
from ..services import user_service
from ..utils.dependencies import CurrentUser
from ..utils.responses import success_response

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = user_service.register_user(
        db,
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
    )
    return success_response(user_to_public(user), message="User created successfully")


@router.get("")
def list_users(db: Session = Depends(get_db)):
    return success_response([user_to_public(u) for u in user_service.list_users(db)])


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return success_response(user_to_public(user_service.get_user(db, user_id)))


def _update(user_id: int, payload: UserUpdate, db: Session, session: CurrentUser) -> dict:
    session.require_self(user_id, "update")
    patch = payload.model_dump(exclude_unset=True)
    user = user_service.update_user(db, user_id=user_id, patch=patch)
    return success_response(user_to_public(user), message="User updated successfully")


@router.put("/{user_id}")
def replace_user(user_id: int, payload: UserUpdate, session: CurrentUser, db: Session = Depends(get_db)):
    return _update(user_id, payload, db, session)


@router.patch("/{user_id}")
def patch_user(user_id: int, payload: UserUpdate, session: CurrentUser, db: Session = Depends(get_db)):
    return _update(user_id, payload, db, session)


@router.delete("/{user_id}")
def delete_user(user_id: int, session: CurrentUser, db: Session = Depends(get_db)):
    session.require_self(user_id, "delete")
    user_service.delete_user(db, user_id=user_id)
    return success_response(message="User deleted successfully")
