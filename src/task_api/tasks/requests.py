from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..cqrs.requests import Command, Query, VoidCommand
from ..models import Priority, TaskEntity


@dataclass(frozen=True)
class GetTasksQuery(Query[List[TaskEntity]]):
    """List tasks, newest first, optionally filtered by completion state and priority."""

    is_completed: Optional[bool] = None
    priority: Optional[Priority] = None


@dataclass(frozen=True)
class GetTaskByIdQuery(Query[Optional[TaskEntity]]):
    task_id: int


@dataclass(frozen=True)
class CreateTaskCommand(Command[TaskEntity]):
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM


@dataclass(frozen=True)
class UpdateTaskCommand(Command[Optional[TaskEntity]]):
    """
    Partial update. None means "leave unchanged" for every field; a blank
    title is also left unchanged, while an empty description is stored as-is.
    """

    task_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None
    priority: Optional[Priority] = None


@dataclass(frozen=True)
class DeleteTaskCommand(Command[bool]):
    task_id: int


@dataclass(frozen=True)
class SeedSampleTasksCommand(VoidCommand):
    """Insert the sample tasks if the store is empty."""


# Every request kind the task API issues; startup refuses to serve unless
# each one has a handler.
TASK_REQUEST_KINDS: Tuple[type, ...] = (
    GetTasksQuery,
    GetTaskByIdQuery,
    CreateTaskCommand,
    UpdateTaskCommand,
    DeleteTaskCommand,
    SeedSampleTasksCommand,
)
