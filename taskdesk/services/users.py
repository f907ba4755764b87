"""User service: credential storage, password hashing and profile updates."""

import logging
from uuid import UUID

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import defer
from sqlmodel import Session, select

from taskdesk.models.base import utcnow
from taskdesk.models.user import PASSWORD_MAX_BYTES, ProfileUpdate, User, UserCreate

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12


class EmailAlreadyRegisteredError(Exception):
    """Raised when registering an email that already has an account."""
    pass


class UserNotFoundError(Exception):
    """Raised when a user is not found."""
    pass


class InvalidCurrentPasswordError(Exception):
    """Raised when a password change supplies the wrong current password."""
    pass


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode("utf-8")
    if len(password_bytes) > PASSWORD_MAX_BYTES:
        return False
    hashed_bytes = hashed_password.encode("utf-8")
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _public_user_query():
    return select(User).options(defer(User.hashed_password))


def get_user_by_id(session: Session, user_id: UUID) -> User | None:
    """Get a user by ID without loading the password hash."""
    return session.exec(_public_user_query().where(User.id == user_id)).first()


def get_user_by_email(session: Session, email: str) -> User | None:
    """Get a user by email address without loading the password hash."""
    return session.exec(
        _public_user_query().where(User.email == email.strip().lower())
    ).first()


def get_user_with_secret(
    session: Session,
    *,
    email: str | None = None,
    user_id: UUID | None = None,
) -> User | None:
    """Get a user with the password hash loaded.

    Only authentication and password changes should go through here.
    """
    if (email is None) == (user_id is None):
        raise ValueError("Pass exactly one of email or user_id")

    query = select(User).execution_options(populate_existing=True)
    if email is not None:
        query = query.where(User.email == email.strip().lower())
    else:
        query = query.where(User.id == user_id)
    return session.exec(query).first()


def create_user(
    session: Session,
    user_data: UserCreate,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User:
    """Create a new user.

    Raises:
        EmailAlreadyRegisteredError: If the email is taken
    """
    email = user_data.email.strip().lower()
    if get_user_by_email(session, email) is not None:
        raise EmailAlreadyRegisteredError(email)

    user = User(
        name=user_data.name,
        email=email,
        hashed_password=hash_password(user_data.password, rounds),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email
        session.rollback()
        raise EmailAlreadyRegisteredError(email) from exc
    session.refresh(user)

    logger.info("User registered", extra={"user_id": str(user.id)})
    return user


def authenticate_user(session: Session, email: str, password: str) -> User | None:
    """
    Authenticate a user by email and password.
    Returns the user if valid, None otherwise.
    """
    user = get_user_with_secret(session, email=email)
    if user is None:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def update_profile(session: Session, user: User, profile_data: ProfileUpdate) -> User:
    """Apply the supplied profile fields. The password hash is never touched."""
    update_data = profile_data.model_dump(exclude_unset=True)

    if "name" in update_data:
        user.name = update_data["name"]
    if "avatar" in update_data:
        user.avatar = update_data["avatar"] or ""

    user.updated_at = utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info(
        "Profile updated",
        extra={"user_id": str(user.id), "fields": sorted(update_data)},
    )
    return user


def change_password(
    session: Session,
    user_id: UUID,
    current_password: str,
    new_password: str,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> None:
    """Replace a user's password after checking the current one.

    Raises:
        UserNotFoundError: If the user no longer exists
        InvalidCurrentPasswordError: If ``current_password`` does not match
    """
    user = get_user_with_secret(session, user_id=user_id)
    if user is None:
        raise UserNotFoundError(str(user_id))

    if not verify_password(current_password, user.hashed_password):
        logger.warning("Password change rejected", extra={"user_id": str(user_id)})
        raise InvalidCurrentPasswordError()

    user.hashed_password = hash_password(new_password, rounds)
    user.updated_at = utcnow()
    session.add(user)
    session.commit()

    logger.info("Password changed", extra={"user_id": str(user_id)})
