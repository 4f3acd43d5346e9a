from __future__ import annotations

from ..cqrs.dispatcher import Dispatcher
from ..cqrs.registry import HandlerRegistry
from ..repositories import Repository
from .handlers import (
    Clock,
    CreateTaskHandler,
    DeleteTaskHandler,
    GetTaskByIdHandler,
    GetTasksHandler,
    SeedSampleTasksHandler,
    UpdateTaskHandler,
    utc_now,
)
from .requests import (
    TASK_REQUEST_KINDS,
    CreateTaskCommand,
    DeleteTaskCommand,
    GetTaskByIdQuery,
    GetTasksQuery,
    SeedSampleTasksCommand,
    UpdateTaskCommand,
)


# PUBLIC_INTERFACE
def build_registry(repo: Repository, clock: Clock = utc_now) -> HandlerRegistry:
    """
    Register one handler per task request kind, verify nothing is missing and
    seal the registry.

    Raises:
        WiringError subclasses on any registration problem, so a broken
        wiring stops the app at startup instead of on the first request.
    """
    registry = HandlerRegistry()
    registry.register(GetTasksQuery, GetTasksHandler(repo))
    registry.register(GetTaskByIdQuery, GetTaskByIdHandler(repo))
    registry.register(CreateTaskCommand, CreateTaskHandler(repo, clock))
    registry.register(UpdateTaskCommand, UpdateTaskHandler(repo, clock))
    registry.register(DeleteTaskCommand, DeleteTaskHandler(repo))
    registry.register(SeedSampleTasksCommand, SeedSampleTasksHandler(repo, clock))
    registry.verify(TASK_REQUEST_KINDS)
    registry.seal()
    return registry


# PUBLIC_INTERFACE
def build_dispatcher(repo: Repository, clock: Clock = utc_now) -> Dispatcher:
    """Return a Dispatcher over a fully wired, sealed task registry."""
    return Dispatcher(build_registry(repo, clock))
