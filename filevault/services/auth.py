"""
Identity service.

Registers users, verifies credentials and resolves profiles. Passwords are
hashed with bcrypt; sessions are stateless JWTs issued by
``filevault.services.jwt``.
"""
import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from filevault.config import settings
from filevault.logging_config import setup_logging
from filevault.models.user import User
from filevault.services.exceptions import (
    DuplicateIdentityError,
    InvalidCredentialError,
    InvalidInputError,
    NotFoundError,
)
from filevault.services.jwt import create_access_token

logger = setup_logging()

# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    # gensalt() yields a fresh random salt per call; rounds sets the cost
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if len(plain_password.encode()) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def register_user(
    db: Session, username: str | None, email: str, password: str
) -> tuple[User, str]:
    """
    Create a user and issue a session token.

    Args:
        db: Database session
        username: Optional display name
        email: Login email, unique and case-sensitive as stored
        password: Plaintext password, hashed before storage

    Returns:
        tuple of (created user, session token)

    Raises:
        InvalidInputError: If email or password is blank, or the password
            exceeds MAX_PASSWORD_BYTES
        DuplicateIdentityError: If the email is already registered
    """
    if not email or not email.strip():
        raise InvalidInputError("Email is required")
    if not password:
        raise InvalidInputError("Password is required")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise InvalidInputError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
        )

    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        raise DuplicateIdentityError("Email already exists")

    user = User(
        username=username.strip() if username and username.strip() else None,
        email=email,
        hashed_password=hash_password(password),
        storage_limit_bytes=settings.DEFAULT_STORAGE_LIMIT_BYTES,
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same email
        db.rollback()
        raise DuplicateIdentityError("Email already exists")
    db.refresh(user)

    logger.info(f"User registered: user_id={user.id}")
    return user, create_access_token(user.id)


def authenticate_user(db: Session, email: str, password: str) -> tuple[User, str]:
    """
    Verify credentials and issue a session token.

    Raises:
        NotFoundError: If no user has this email
        InvalidCredentialError: If the password does not match
    """
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")

    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialError("Invalid credentials")

    return user, create_access_token(user.id)


def get_user_profile(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
