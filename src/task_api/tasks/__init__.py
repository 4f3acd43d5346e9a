"""Task request kinds, their handlers and the startup wiring."""

from .requests import (
    TASK_REQUEST_KINDS,
    CreateTaskCommand,
    DeleteTaskCommand,
    GetTaskByIdQuery,
    GetTasksQuery,
    SeedSampleTasksCommand,
    UpdateTaskCommand,
)
from .validation import TaskValidationError
from .wiring import build_dispatcher, build_registry

__all__ = [
    "TASK_REQUEST_KINDS",
    "CreateTaskCommand",
    "DeleteTaskCommand",
    "GetTaskByIdQuery",
    "GetTasksQuery",
    "SeedSampleTasksCommand",
    "TaskValidationError",
    "UpdateTaskCommand",
    "build_dispatcher",
    "build_registry",
]
