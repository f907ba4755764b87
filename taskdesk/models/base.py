"""Shared schema base for API request and response bodies."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator
from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current time as an aware UTC timestamp."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive values; SQLite drops the offset on read."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Timestamps always leave the API with a UTC offset
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


def timestamp_field():
    """Column holding a time-zone aware timestamp, defaulting to now."""
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class APIModel(SQLModel):
    """Schema serialized with camelCase keys.

    Input accepts both ``due_date`` and ``dueDate``.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class MessageResponse(APIModel):
    """Envelope carrying only a status message."""

    success: bool = True
    message: str | None = None
