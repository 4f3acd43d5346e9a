"""
One handler per task request kind.

Handlers own no state beyond the store they delegate to and a clock. "Not
found" is reported as None (or False for deletes), never raised.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import structlog

from ..cqrs.cancellation import CancellationToken
from ..cqrs.handlers import CommandHandler, QueryHandler, VoidCommandHandler
from ..models import NewTask, Priority, TaskEntity
from ..repositories import Repository, TaskFilter
from .requests import (
    CreateTaskCommand,
    DeleteTaskCommand,
    GetTaskByIdQuery,
    GetTasksQuery,
    SeedSampleTasksCommand,
    UpdateTaskCommand,
)
from .validation import check_description, clean_title

Clock = Callable[[], datetime]

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GetTasksHandler(QueryHandler[GetTasksQuery, List[TaskEntity]]):
    request_type = GetTasksQuery

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def handle(self, query: GetTasksQuery, cancel: CancellationToken) -> List[TaskEntity]:
        return self._repo.list(
            TaskFilter(is_completed=query.is_completed, priority=query.priority), cancel
        )


class GetTaskByIdHandler(QueryHandler[GetTaskByIdQuery, Optional[TaskEntity]]):
    request_type = GetTaskByIdQuery

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def handle(self, query: GetTaskByIdQuery, cancel: CancellationToken) -> Optional[TaskEntity]:
        return self._repo.get(query.task_id, cancel)


class CreateTaskHandler(CommandHandler[CreateTaskCommand, TaskEntity]):
    """
    Create a task. New tasks always start open: is_completed False and no
    completed_at, whatever the caller would like.
    """

    request_type = CreateTaskCommand

    def __init__(self, repo: Repository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def handle(self, command: CreateTaskCommand, cancel: CancellationToken) -> TaskEntity:
        new_task: NewTask = {
            "title": clean_title(command.title, required=True),  # type: ignore[typeddict-item]
            "description": check_description(command.description),
            "is_completed": False,
            "created_at": self._clock(),
            "completed_at": None,
            "priority": Priority.parse(command.priority),
        }
        created = self._repo.add(new_task, cancel)
        logger.info("task_created", task_id=created["id"], priority=int(created["priority"]))
        return created


class UpdateTaskHandler(CommandHandler[UpdateTaskCommand, Optional[TaskEntity]]):
    """
    Apply a partial update.

    Completion transitions keep completed_at consistent with is_completed:
    completing stamps the current time unless a stamp already exists,
    re-opening clears it.
    """

    request_type = UpdateTaskCommand

    def __init__(self, repo: Repository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def handle(self, command: UpdateTaskCommand, cancel: CancellationToken) -> Optional[TaskEntity]:
        task = self._repo.get(command.task_id, cancel)
        if task is None:
            return None

        title = clean_title(command.title, required=False)
        if title is not None:
            task["title"] = title

        if command.description is not None:
            task["description"] = check_description(command.description)

        if command.is_completed is not None:
            task["is_completed"] = command.is_completed
            if task["is_completed"] and task["completed_at"] is None:
                task["completed_at"] = self._clock()
            elif not task["is_completed"]:
                task["completed_at"] = None

        if command.priority is not None:
            task["priority"] = Priority.parse(command.priority)

        updated = self._repo.save(task, cancel)
        if updated is not None:
            logger.info("task_updated", task_id=updated["id"], is_completed=updated["is_completed"])
        return updated


class DeleteTaskHandler(CommandHandler[DeleteTaskCommand, bool]):
    request_type = DeleteTaskCommand

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def handle(self, command: DeleteTaskCommand, cancel: CancellationToken) -> bool:
        deleted = self._repo.delete(command.task_id, cancel)
        if deleted:
            logger.info("task_deleted", task_id=command.task_id)
        return deleted


class SeedSampleTasksHandler(VoidCommandHandler[SeedSampleTasksCommand]):
    request_type = SeedSampleTasksCommand

    def __init__(self, repo: Repository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def handle(self, command: SeedSampleTasksCommand, cancel: CancellationToken) -> None:
        if self._repo.count(cancel) > 0:
            return
        samples = _sample_tasks(self._clock())
        for task in samples:
            self._repo.add(task, cancel)
        logger.info("sample_tasks_seeded", count=len(samples))


def _sample_tasks(now: datetime) -> List[NewTask]:
    return [
        {
            "title": "Complete project setup",
            "description": "Set up the basic structure for the Task Manager application",
            "is_completed": True,
            "created_at": now - timedelta(days=2),
            "completed_at": now - timedelta(days=1),
            "priority": Priority.HIGH,
        },
        {
            "title": "Implement CRUD operations",
            "description": "Add Create, Read, Update, Delete functionality for tasks",
            "is_completed": False,
            "created_at": now - timedelta(days=1),
            "completed_at": None,
            "priority": Priority.MEDIUM,
        },
        {
            "title": "Design UI components",
            "description": "Create React components for task management interface",
            "is_completed": False,
            "created_at": now,
            "completed_at": None,
            "priority": Priority.MEDIUM,
        },
    ]
