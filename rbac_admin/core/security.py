"""JWT access-token validation for mutating endpoints."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from rbac_admin.core.config import settings
from rbac_admin.core.exceptions import InvalidTokenError


class Identity(BaseModel):
    """The administrator acting on a request, taken from a validated token."""
    user_id: int
    email: Optional[str] = None
    role: Optional[str] = None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Issuance belongs to the login service; this is used by the CLI and tests.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise InvalidTokenError()


def validate_token(authorization: Optional[str]) -> Identity:
    """Validate the raw value of an Authorization header.

    Both ``Bearer <token>`` and a bare ``<token>`` are accepted.

    Raises:
        InvalidTokenError: header absent, malformed, expired, or not an
            access token carrying a numeric ``sub`` claim.
    """
    if not authorization or not authorization.strip():
        raise InvalidTokenError()

    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        token = parts[1]
    elif len(parts) == 1:
        token = parts[0]
    else:
        raise InvalidTokenError()

    payload = decode_token(token)
    if payload.get("type") != "access":
        raise InvalidTokenError()

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise InvalidTokenError("El token no identifica a un usuario.")

    return Identity(
        user_id=user_id,
        email=payload.get("email"),
        role=payload.get("role"),
    )
