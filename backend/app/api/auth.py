from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.user import LoginRequest, user_to_public
from ..services.auth_service import authenticate
from ..utils.responses import success_response

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, token = authenticate(db, email=payload.email, password=payload.password)
    return success_response(
        {
            "user": user_to_public(user),
            "token": token,
            "token_type": "bearer",
        },
        message="Login successful",
    )


@router.post("/logout")
def logout():
    # Tokens are stateless; the client simply drops it.
    return success_response(message="Logged out successfully")
