"""Task API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from taskdesk.api.deps import CurrentUser, DBSession
from taskdesk.models.base import MessageResponse
from taskdesk.models.task import (
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskdesk.services.tasks import (
    TaskNotFoundError,
    TaskQuery,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Task not found.",
    )


@router.get("", response_model=TaskListResponse)
def list_tasks_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    q: str | None = Query(default=None, description="Search title and description"),
    task_status: str | None = Query(default=None, alias="status", description="todo, in-progress or done"),
    priority: str | None = Query(default=None, description="low, medium or high"),
    sort_by: str = Query(default="createdAt", alias="sortBy", description="createdAt, dueDate, priority, status or title"),
    order: str = Query(default="desc", description="asc or desc"),
) -> TaskListResponse:
    """List the authenticated user's tasks.

    Unrecognised filter and sort values are ignored.
    """
    tasks, stats = list_tasks(
        session,
        current_user.id,
        TaskQuery(
            search=q,
            status=task_status,
            priority=priority,
            sort_by=sort_by,
            order=order,
        ),
    )
    return TaskListResponse(
        count=len(tasks),
        tasks=[TaskResponse.model_validate(t) for t in tasks],
        stats=stats,
    )


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_data: TaskCreate,
) -> TaskEnvelope:
    """Create a new task for the authenticated user."""
    task = create_task(session, current_user.id, task_data)
    return TaskEnvelope(message="Task created.", task=TaskResponse.model_validate(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_id: str,
) -> TaskEnvelope:
    """Get a specific task by ID."""
    try:
        task = get_task(session, current_user.id, task_id)
    except TaskNotFoundError:
        raise _not_found()
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_id: str,
    task_data: TaskUpdate,
) -> TaskEnvelope:
    """Update any subset of a task's fields."""
    try:
        task = update_task(session, current_user.id, task_id, task_data)
    except TaskNotFoundError:
        raise _not_found()
    return TaskEnvelope(message="Task updated.", task=TaskResponse.model_validate(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_id: str,
) -> MessageResponse:
    """Delete a task."""
    try:
        delete_task(session, current_user.id, task_id)
    except TaskNotFoundError:
        raise _not_found()
    return MessageResponse(message="Task deleted.")
