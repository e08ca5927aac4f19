"""Per-request session context, decoded from the bearer token."""
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .error_handlers import ForbiddenError, UnauthorizedError, get_error_message
from .jwt import decode_access_token

# auto_error=False so a missing header maps to our 401 envelope instead of FastAPI's 403.
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    user_id: int
    email: str

    def require_self(self, user_id: int, action: str = "modify") -> None:
        if int(user_id) != self.user_id:
            raise ForbiddenError(f"You can only {action} your own account")


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> SessionContext:
    if not credentials or not credentials.credentials:
        raise UnauthorizedError(get_error_message("token_required"))

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise ForbiddenError(get_error_message("token_invalid"))

    try:
        user_id = int(payload.get("userId") or payload.get("sub"))
    except (TypeError, ValueError):
        raise ForbiddenError(get_error_message("token_invalid")) from None

    return SessionContext(user_id=user_id, email=str(payload.get("email") or ""))


CurrentUser = Annotated[SessionContext, Depends(get_current_user)]
