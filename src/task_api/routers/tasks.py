from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import PlainTextResponse

from ..cqrs.cancellation import CancellationToken
from ..cqrs.dispatcher import Dispatcher
from ..models import Priority
from ..schemas import TaskCreate, TaskOut, TaskUpdate
from ..tasks.requests import (
    CreateTaskCommand,
    DeleteTaskCommand,
    GetTaskByIdQuery,
    GetTasksQuery,
    UpdateTaskCommand,
)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


def get_dispatcher(request: Request) -> Dispatcher:
    """
    Dependency returning the dispatcher wired at application startup.
    """
    return request.app.state.dispatcher


def get_cancellation_token() -> CancellationToken:
    """
    A fresh, never-cancelled token per request.

    The HTTP layer does not watch for client disconnects, so this token is a
    pass-through: it reaches every handler and store call, and only code that
    holds it (tests, or a caller building its own token) can cancel it.
    """
    return CancellationToken()


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    # An empty query value (`?priority=`) means "no filter"
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_bool_param(name: str, value: Optional[str]) -> Optional[bool]:
    value = _blank_to_none(value)
    if value is None:
        return None
    lowered = value.lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Invalid value for {name}: {value!r}. Expected true or false.",
    )


def _parse_priority_param(value: Optional[str]) -> Optional[Priority]:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return Priority.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


def _not_found(task_id: int) -> PlainTextResponse:
    return PlainTextResponse(f"Task with ID {task_id} not found", status_code=status.HTTP_404_NOT_FOUND)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description=(
        "List tasks, most recently created first.\n\n"
        "Query parameters:\n"
        "- isCompleted: filter by completion status\n"
        "- priority: filter by priority, 1-3 or Low/Medium/High\n\n"
        "Filters combine with AND; an absent or empty filter matches every task."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"description": "Invalid query parameters"},
    },
)
def list_tasks(
    is_completed: Optional[str] = Query(
        None, alias="isCompleted", description="Filter by completion status: true or false"
    ),
    priority: Optional[str] = Query(None, description="Filter by priority: 1-3 or Low/Medium/High"),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    cancel: CancellationToken = Depends(get_cancellation_token),
) -> List[TaskOut]:
    """
    List tasks with optional filters.
    """
    query = GetTasksQuery(
        is_completed=_parse_bool_param("isCompleted", is_completed),
        priority=_parse_priority_param(priority),
    )
    tasks = dispatcher.ask(query, cancel)
    return [TaskOut(**t) for t in tasks]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={
        200: {"description": "Task found"},
        404: {"description": "Task not found", "content": {"text/plain": {}}},
    },
)
def get_task(
    task_id: int,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    cancel: CancellationToken = Depends(get_cancellation_token),
):
    """
    Retrieve a single task by its ID.
    """
    task = dispatcher.ask(GetTaskByIdQuery(task_id=task_id), cancel)
    if task is None:
        return _not_found(task_id)
    return TaskOut(**task)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task. The Location header points at the created resource.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Validation error"},
    },
)
def create_task(
    payload: TaskCreate,
    request: Request,
    response: Response,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    cancel: CancellationToken = Depends(get_cancellation_token),
) -> TaskOut:
    """
    Create a new task.
    """
    created = dispatcher.execute(
        CreateTaskCommand(
            title=payload.title,
            description=payload.description,
            priority=payload.priority,
        ),
        cancel,
    )
    response.headers["Location"] = str(request.url_for("get_task", task_id=created["id"]))
    return TaskOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description=(
        "Update a task. Only fields present and non-null in the body are applied; "
        "a whitespace-only title is ignored, an empty one is rejected."
    ),
    responses={
        200: {"description": "Task updated"},
        400: {"description": "Validation error"},
        404: {"description": "Task not found", "content": {"text/plain": {}}},
    },
)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    cancel: CancellationToken = Depends(get_cancellation_token),
):
    """
    Partial update of a task.
    """
    updated = dispatcher.execute(
        UpdateTaskCommand(
            task_id=task_id,
            title=payload.title,
            description=payload.description,
            is_completed=payload.is_completed,
            priority=payload.priority,
        ),
        cancel,
    )
    if updated is None:
        return _not_found(task_id)
    return TaskOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found", "content": {"text/plain": {}}},
    },
)
def delete_task(
    task_id: int,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    cancel: CancellationToken = Depends(get_cancellation_token),
) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    if not dispatcher.execute(DeleteTaskCommand(task_id=task_id), cancel):
        return _not_found(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
