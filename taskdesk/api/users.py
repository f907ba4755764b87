"""User profile API endpoints."""

from fastapi import APIRouter, HTTPException, status

from taskdesk.api.deps import AppSettings, CurrentUser, DBSession
from taskdesk.models.base import MessageResponse
from taskdesk.models.user import PasswordChange, ProfileUpdate, UserEnvelope, UserResponse
from taskdesk.services.users import (
    InvalidCurrentPasswordError,
    UserNotFoundError,
    change_password,
    update_profile,
)

router = APIRouter(prefix="/api/user", tags=["User"])


@router.get("/profile", response_model=UserEnvelope)
def get_profile_endpoint(current_user: CurrentUser) -> UserEnvelope:
    """Get the authenticated user's profile."""
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=UserEnvelope)
def update_profile_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    profile_data: ProfileUpdate,
) -> UserEnvelope:
    """Update name and/or avatar."""
    user = update_profile(session, current_user, profile_data)
    return UserEnvelope(
        message="Profile updated successfully.",
        user=UserResponse.model_validate(user),
    )


@router.put("/change-password", response_model=MessageResponse)
def change_password_endpoint(
    session: DBSession,
    settings: AppSettings,
    current_user: CurrentUser,
    password_data: PasswordChange,
) -> MessageResponse:
    """Change the password after confirming the current one."""
    try:
        change_password(
            session,
            current_user.id,
            password_data.current_password,
            password_data.new_password,
            rounds=settings.BCRYPT_ROUNDS,
        )
    except InvalidCurrentPasswordError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect.",
        )
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found. Token invalid.",
        )
    return MessageResponse(message="Password changed successfully.")
