"""Task service for CRUD operations, filtering and aggregate counts."""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import case, or_
from sqlmodel import Session, func, select

from taskdesk.models.base import utcnow
from taskdesk.models.task import (
    Priority,
    Task,
    TaskCreate,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "createdAt"

# Enum columns sort by their declared rank, not alphabetically
STATUS_RANK = case(
    {TaskStatus.TODO: 0, TaskStatus.IN_PROGRESS: 1, TaskStatus.DONE: 2},
    value=Task.status,
)
PRIORITY_RANK = case(
    {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2},
    value=Task.priority,
)

SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "dueDate": Task.due_date,
    "priority": PRIORITY_RANK,
    "status": STATUS_RANK,
    "title": func.lower(Task.title),
}


class TaskNotFoundError(Exception):
    """Raised when a task is not found or belongs to another user."""
    pass


@dataclass(frozen=True)
class TaskQuery:
    """Raw list parameters as received from the client.

    Values that are not recognised are ignored rather than rejected.
    """

    search: str | None = None
    status: str | None = None
    priority: str | None = None
    sort_by: str | None = None
    order: str | None = None

    @property
    def search_term(self) -> str | None:
        if self.search is None:
            return None
        term = self.search.strip()
        return term or None

    @property
    def status_filter(self) -> TaskStatus | None:
        return _enum_or_none(TaskStatus, self.status)

    @property
    def priority_filter(self) -> Priority | None:
        return _enum_or_none(Priority, self.priority)

    @property
    def sort_field(self) -> str:
        return self.sort_by if self.sort_by in SORT_COLUMNS else DEFAULT_SORT_FIELD

    @property
    def ascending(self) -> bool:
        return (self.order or "").lower() == "asc"


def _enum_or_none(enum_cls, value: str | None):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_task_id(task_id: UUID | str) -> UUID | None:
    if isinstance(task_id, UUID):
        return task_id
    try:
        return UUID(task_id)
    except (TypeError, ValueError):
        return None


def create_task(session: Session, user_id: UUID, task_data: TaskCreate) -> Task:
    """Create a new task for the specified user."""
    task = Task(
        user_id=user_id,
        title=task_data.title,
        description=task_data.description,
        status=task_data.status,
        priority=task_data.priority,
        due_date=task_data.due_date,
    )
    session.add(task)
    session.commit()
    session.refresh(task)

    logger.info(
        "Task created",
        extra={"task_id": str(task.id), "user_id": str(user_id)},
    )
    return task


def get_task_stats(session: Session, user_id: UUID) -> TaskStats:
    """Count the user's tasks in total and per status."""
    rows = session.exec(
        select(Task.status, func.count())
        .where(Task.user_id == user_id)
        .group_by(Task.status)
    ).all()

    counts = {status: count for status, count in rows}
    return TaskStats(
        total=sum(counts.values()),
        todo=counts.get(TaskStatus.TODO, 0),
        in_progress=counts.get(TaskStatus.IN_PROGRESS, 0),
        done=counts.get(TaskStatus.DONE, 0),
    )


def list_tasks(
    session: Session,
    user_id: UUID,
    params: TaskQuery | None = None,
) -> tuple[list[Task], TaskStats]:
    """
    Get tasks for the specified user with optional search, filters and sort.
    Returns (tasks, stats); stats always describe the whole collection.
    """
    params = params or TaskQuery()
    query = select(Task).where(Task.user_id == user_id)

    term = params.search_term
    if term is not None:
        pattern = f"%{_escape_like(term)}%"
        query = query.where(
            or_(
                Task.title.ilike(pattern, escape="\\"),
                Task.description.ilike(pattern, escape="\\"),
            )
        )

    status = params.status_filter
    if status is not None:
        query = query.where(Task.status == status)

    priority = params.priority_filter
    if priority is not None:
        query = query.where(Task.priority == priority)

    column = SORT_COLUMNS[params.sort_field]
    if params.ascending:
        query = query.order_by(column.asc(), Task.created_at.asc(), Task.id.asc())
    else:
        query = query.order_by(column.desc(), Task.created_at.desc(), Task.id.desc())

    tasks = list(session.exec(query).all())
    return tasks, get_task_stats(session, user_id)


def get_task_by_id(session: Session, user_id: UUID, task_id: UUID | str) -> Task | None:
    """Get a specific task owned by the user."""
    parsed_id = _parse_task_id(task_id)
    if parsed_id is None:
        return None
    return session.exec(
        select(Task).where(Task.id == parsed_id, Task.user_id == user_id)
    ).first()


def get_task(session: Session, user_id: UUID, task_id: UUID | str) -> Task:
    """Get a task owned by the user.

    Raises:
        TaskNotFoundError: If the task does not exist or is not the user's
    """
    task = get_task_by_id(session, user_id, task_id)
    if task is None:
        raise TaskNotFoundError(f"Task {task_id} not found")
    return task


def update_task(
    session: Session,
    user_id: UUID,
    task_id: UUID | str,
    task_data: TaskUpdate,
) -> Task:
    """Update a task with the fields present in ``task_data``.

    Raises:
        TaskNotFoundError: If the task does not exist or is not the user's
    """
    task = get_task(session, user_id, task_id)
    update_data = task_data.model_dump(exclude_unset=True)

    for key, value in update_data.items():
        setattr(task, key, value)

    task.updated_at = utcnow()
    session.add(task)
    session.commit()
    session.refresh(task)

    logger.info(
        "Task updated",
        extra={"task_id": str(task.id), "fields": sorted(update_data)},
    )
    return task


def delete_task(session: Session, user_id: UUID, task_id: UUID | str) -> None:
    """Delete a task.

    Raises:
        TaskNotFoundError: If the task does not exist or is not the user's
    """
    task = get_task(session, user_id, task_id)
    deleted_id = task.id
    session.delete(task)
    session.commit()

    logger.info("Task deleted", extra={"task_id": str(deleted_id)})
