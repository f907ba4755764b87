"""User entity model."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from pydantic import EmailStr, field_validator
from sqlmodel import Field, Relationship, SQLModel

from taskdesk.models.base import APIModel, UTCDateTime, timestamp_field

if TYPE_CHECKING:
    from taskdesk.models.task import Task

PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


class UserBase(SQLModel):
    """Base User schema."""

    name: str = Field(min_length=2, max_length=50)
    email: str = Field(max_length=255, unique=True, index=True)
    avatar: str = Field(default="", max_length=255)


class User(UserBase, table=True):
    """User database model."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    hashed_password: str = Field(max_length=255)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

    tasks: list["Task"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"passive_deletes": True},
    )


class UserCreate(APIModel):
    """Schema for user registration."""

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserLogin(APIModel):
    """Schema for user login."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class ProfileUpdate(APIModel):
    """Schema for profile update. Omitted fields are left untouched."""

    name: str | None = Field(default=None, min_length=2, max_length=50)
    avatar: str | None = Field(default=None, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        if value is None:
            raise ValueError("Name cannot be null")
        return value.strip() if isinstance(value, str) else value


class PasswordChange(APIModel):
    """Schema for password change."""

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH)

    @field_validator("new_password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserResponse(APIModel):
    """Schema for user response (no password)."""

    id: UUID
    name: str
    email: str
    avatar: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


class UserEnvelope(APIModel):
    """Envelope for a single user."""

    success: bool = True
    message: str | None = None
    user: UserResponse


class AuthResponse(APIModel):
    """Schema for authentication response."""

    success: bool = True
    message: str | None = None
    token: str
    expires_at: UTCDateTime
    user: UserResponse
