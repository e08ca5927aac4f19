import logging

from sqlalchemy.orm import Session

from ..models.user import User
from ..repositories.user_repo import UserRepository
from ..utils.error_handlers import InvalidCredentialsError, ValidationError
from ..utils.jwt import create_access_token
from ..utils.security import verify_password

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "userId": user.id, "email": user.email})


def authenticate(db: Session, *, email: str, password: str) -> tuple[User, str]:
    """
    Verify credentials and issue a 24h session token.

    Unknown email and wrong password raise the same error so callers cannot
    probe which addresses are registered.
    """
    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = UserRepository(db).find_by_email(email)
    if not user or not verify_password(password, user.password):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError()

    token = issue_token(user)
    logger.info("User %s logged in", user.id)
    return user, token
