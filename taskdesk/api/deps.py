"""API dependencies for dependency injection."""

import logging
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from taskdesk.config import Settings
from taskdesk.db.session import get_session
from taskdesk.models.user import User
from taskdesk.services.auth import TokenExpiredError, TokenInvalidError, verify_token
from taskdesk.services.users import get_user_by_id

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """Get database session dependency."""
    yield from get_session(request.app.state.engine)


AppSettings = Annotated[Settings, Depends(get_app_settings)]
DBSession = Annotated[Session, Depends(get_db_session)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    session: DBSession,
    settings: AppSettings,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Get current authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Access denied. No token provided.")

    try:
        user_id = verify_token(credentials.credentials, settings)
    except TokenExpiredError:
        raise _unauthorized("Token expired.")
    except TokenInvalidError:
        raise _unauthorized("Invalid token.")

    user = get_user_by_id(session, user_id)
    if user is None:
        logger.warning("Token for unknown user", extra={"user_id": str(user_id)})
        raise _unauthorized("User not found. Token invalid.")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
