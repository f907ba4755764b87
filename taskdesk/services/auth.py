"""Authentication service: JWT issuing and verification."""

from datetime import datetime
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from taskdesk.config import Settings
from taskdesk.models.base import utcnow
from taskdesk.models.user import AuthResponse, User, UserResponse


class TokenError(Exception):
    """Base class for bearer token failures."""
    pass


class TokenExpiredError(TokenError):
    """Raised when a token's ``exp`` claim is in the past."""
    pass


class TokenInvalidError(TokenError):
    """Raised for a bad signature, a tampered payload or an unusable subject."""
    pass


def issue_token(
    user_id: UUID,
    settings: Settings,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """
    Generate a JWT token for the user.
    Returns (token, expires_at).
    """
    issued_at = now or utcnow()
    expires_at = issued_at + settings.JWT_EXPIRES_IN
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def verify_token(token: str, settings: Settings) -> UUID:
    """Return the user ID a token was issued for.

    Raises:
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the token is malformed, tampered with or signed
            with another key
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except JWTError as exc:
        raise TokenInvalidError("Invalid token") from exc

    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise TokenInvalidError("Token has no subject")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise TokenInvalidError("Token subject is not a user ID") from exc


def create_auth_response(
    user: User,
    settings: Settings,
    message: str | None = None,
) -> AuthResponse:
    """Create an authentication response with JWT token."""
    token, expires_at = issue_token(user.id, settings)
    return AuthResponse(
        message=message,
        token=token,
        expires_at=expires_at,
        user=UserResponse.model_validate(user),
    )
