"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from taskdesk.api.deps import AppSettings, CurrentUser, DBSession
from taskdesk.models.base import MessageResponse
from taskdesk.models.user import (
    AuthResponse,
    UserCreate,
    UserEnvelope,
    UserLogin,
    UserResponse,
)
from taskdesk.services.auth import create_auth_response
from taskdesk.services.users import (
    EmailAlreadyRegisteredError,
    authenticate_user,
    create_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    session: DBSession,
    settings: AppSettings,
    user_data: UserCreate,
) -> AuthResponse:
    """Register a new user account."""
    try:
        user = create_user(session, user_data, rounds=settings.BCRYPT_ROUNDS)
    except EmailAlreadyRegisteredError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered.",
        )

    return create_auth_response(user, settings, message="Account created successfully.")


@router.post("/login", response_model=AuthResponse)
def login_user(
    session: DBSession,
    settings: AppSettings,
    credentials: UserLogin,
) -> AuthResponse:
    """Sign in with email and password."""
    user = authenticate_user(session, credentials.email, credentials.password)
    if user is None:
        logger.warning("Failed login attempt")
        # Same message for unknown email and wrong password
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    logger.info("User logged in", extra={"user_id": str(user.id)})
    return create_auth_response(user, settings, message="Logged in successfully.")


@router.get("/me", response_model=UserEnvelope)
def get_me(current_user: CurrentUser) -> UserEnvelope:
    """Return the authenticated user."""
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.post("/logout", response_model=MessageResponse)
def logout_user(current_user: CurrentUser) -> MessageResponse:
    """Sign out.

    Tokens are stateless, so the client discards its token; nothing is
    revoked server-side.
    """
    return MessageResponse(message="Logged out successfully.")
