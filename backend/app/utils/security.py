import bcrypt

from ..config import BCRYPT_ROUNDS
from .error_handlers import ValidationError

# bcrypt only looks at the first 72 bytes; longer secrets are refused rather than silently truncated.
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Return a bcrypt hash for storage in `users.password`."""
    pw_bytes = (password or "").encode("utf-8")
    if not pw_bytes:
        raise ValidationError("Password is required", details=[{"field": "password", "message": "Password is required"}])
    if len(pw_bytes) > _BCRYPT_MAX_BYTES:
        message = f"Password must be {_BCRYPT_MAX_BYTES} bytes or less"
        raise ValidationError(message, details=[{"field": "password", "message": message}])

    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > _BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False
