from datetime import datetime, timedelta, timezone

import jwt

from filevault.config import settings
from filevault.services.exceptions import InvalidTokenError


def create_access_token(user_id: int) -> str:
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "iat": issued_at, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.PyJWTError:
        return None


def validate_access_token(token: str) -> int:
    """
    Verify a session token and return its subject user id.

    Malformed, expired, badly signed and subject-less tokens all raise the
    same InvalidTokenError so callers cannot tell the cases apart.
    """
    payload = decode_access_token(token)
    if not payload:
        raise InvalidTokenError("Invalid token")

    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidTokenError("Invalid token")
