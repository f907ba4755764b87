"""SQLModel entities for the Taskdesk application."""

from taskdesk.models.task import Priority, Task, TaskStatus
from taskdesk.models.user import User

__all__ = [
    "User",
    "Task",
    "TaskStatus",
    "Priority",
]
