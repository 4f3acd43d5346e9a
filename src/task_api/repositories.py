from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import RLock
from typing import Iterable, List, Optional

from .cqrs.cancellation import CancellationToken
from .models import NewTask, Priority, TaskEntity
from .settings import Settings, get_settings


@dataclass(frozen=True)
class TaskFilter:
    """
    Filters for a task scan. None means "don't filter on this field".
    """
    is_completed: Optional[bool] = None
    priority: Optional[Priority] = None


def check_cancelled(cancel: Optional[CancellationToken]) -> None:
    if cancel is not None:
        cancel.raise_if_cancelled()


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract store contract for tasks.

    Every method takes an optional cancellation token and checks it before
    touching storage.
    """

    @abstractmethod
    def get(self, task_id: int, cancel: Optional[CancellationToken] = None) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def add(self, task: NewTask, cancel: Optional[CancellationToken] = None) -> TaskEntity:
        """Insert a task, assign its id and return the stored entity."""

    @abstractmethod
    def save(self, task: TaskEntity, cancel: Optional[CancellationToken] = None) -> Optional[TaskEntity]:
        """Overwrite an existing task. Return the stored entity or None if the id is unknown."""

    @abstractmethod
    def delete(self, task_id: int, cancel: Optional[CancellationToken] = None) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list(
        self, query: Optional[TaskFilter] = None, cancel: Optional[CancellationToken] = None
    ) -> List[TaskEntity]:
        """
        Return every task matching the filter, newest created_at first
        (ties broken by descending id).
        """

    @abstractmethod
    def count(self, cancel: Optional[CancellationToken] = None) -> int:
        """Return the number of stored tasks."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TaskEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def get(self, task_id: int, cancel: Optional[CancellationToken] = None) -> Optional[TaskEntity]:
        check_cancelled(cancel)
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def add(self, task: NewTask, cancel: Optional[CancellationToken] = None) -> TaskEntity:
        check_cancelled(cancel)
        entity: TaskEntity = {"id": self._allocate_id(), **task}  # type: ignore[typeddict-item]
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()  # type: ignore[return-value]

    def save(self, task: TaskEntity, cancel: Optional[CancellationToken] = None) -> Optional[TaskEntity]:
        check_cancelled(cancel)
        with self._lock:
            if task["id"] not in self._items:
                return None
            stored = task.copy()
            self._items[task["id"]] = stored  # type: ignore[assignment]
            return stored.copy()  # type: ignore[return-value]

    def delete(self, task_id: int, cancel: Optional[CancellationToken] = None) -> bool:
        check_cancelled(cancel)
        with self._lock:
            return self._items.pop(task_id, None) is not None

    def list(
        self, query: Optional[TaskFilter] = None, cancel: Optional[CancellationToken] = None
    ) -> List[TaskEntity]:
        check_cancelled(cancel)
        q = query or TaskFilter()
        with self._lock:
            items: Iterable[TaskEntity] = self._items.values()

            if q.is_completed is not None:
                items = [t for t in items if t["is_completed"] == q.is_completed]
            if q.priority is not None:
                items = [t for t in items if t["priority"] == q.priority]

            items_sorted = sorted(items, key=lambda t: (t["created_at"], t["id"]), reverse=True)

            # Return copies to avoid external mutation
            return [t.copy() for t in items_sorted]  # type: ignore[misc]

    def count(self, cancel: Optional[CancellationToken] = None) -> int:
        check_cancelled(cancel)
        with self._lock:
            return len(self._items)


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Build the configured repository.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository backed by settings.sqlite_db_path
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
