"""Task entity model."""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from pydantic import field_validator
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index
from sqlmodel import Field, Relationship, SQLModel

from taskdesk.models.base import APIModel, UTCDateTime, timestamp_field

if TYPE_CHECKING:
    from taskdesk.models.user import User

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class TaskStatus(str, Enum):
    """Workflow state of a task, in board order."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Priority(str, Enum):
    """Task priority, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class TaskBase(SQLModel):
    """Base Task schema."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)


class Task(TaskBase, table=True):
    """Task database model."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_id_created_at", "user_id", "created_at"),
        Index("ix_tasks_user_id_status", "user_id", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        sa_type=SAEnum(TaskStatus, name="taskstatus", values_callable=_enum_values),
    )
    priority: Priority = Field(
        default=Priority.MEDIUM,
        sa_type=SAEnum(Priority, name="priority", values_callable=_enum_values),
    )
    due_date: date | None = Field(default=None)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

    user: "User" = Relationship(back_populates="tasks")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _blank_to_none(value):
    # An empty date string from a form means "no due date"
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TaskCreate(APIModel):
    """Schema for task creation."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return _strip(value)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, value):
        if value is None:
            return ""
        return _strip(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date(cls, value):
        return _blank_to_none(value)


class TaskUpdate(APIModel):
    """Schema for task update.

    Only fields present in the request body are applied. An explicit null
    or empty ``dueDate`` clears the due date; a null ``description`` clears
    the description. Title, status and priority cannot be cleared.
    """

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus | None = None
    priority: Priority | None = None
    due_date: date | None = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return _strip(value) if info.field_name == "title" else value

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, value):
        if value is None:
            return ""
        return _strip(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date(cls, value):
        return _blank_to_none(value)


class TaskResponse(APIModel):
    """Schema for task response."""

    id: UUID
    title: str
    description: str
    status: TaskStatus
    priority: Priority
    due_date: date | None
    user_id: UUID
    created_at: UTCDateTime
    updated_at: UTCDateTime


class TaskEnvelope(APIModel):
    """Envelope for a single task."""

    success: bool = True
    message: str | None = None
    task: TaskResponse


class TaskStats(APIModel):
    """Counts over the owner's whole collection, independent of filters."""

    total: int = 0
    todo: int = 0
    in_progress: int = 0
    done: int = 0


class TaskListResponse(APIModel):
    """Schema for task list response."""

    success: bool = True
    count: int
    tasks: list[TaskResponse]
    stats: TaskStats
