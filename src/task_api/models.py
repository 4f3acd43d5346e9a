from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Optional, TypedDict, Union


# PUBLIC_INTERFACE
class Priority(IntEnum):
    """Task priority. Serialized as its integer value."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def parse(cls, value: Union["Priority", int, str]) -> "Priority":
        """
        Accept an enum member, its integer value, a digit string or a
        case-insensitive member name ("High", "low", ...).

        Raises:
            ValueError if the value names no priority.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid priority: {value!r}")
        if isinstance(value, int):
            return cls(value)
        s = str(value).strip()
        if s.isdigit():
            return cls(int(s))
        try:
            return cls[s.upper()]
        except KeyError:
            raise ValueError(
                f"Invalid priority: {value!r}. Use 1-3 or one of Low, Medium, High."
            ) from None


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    Storage representation of a Task, shared by every store backend.

    Fields:
    - id: Unique integer identifier assigned by the store
    - title: Short title (1..200 chars, trimmed)
    - description: Optional detailed description (<= 1000 chars)
    - is_completed: Completion flag
    - created_at: UTC creation timestamp, never changed after insert
    - completed_at: UTC completion timestamp; set iff is_completed
    - priority: Priority level
    """

    id: int
    title: str
    description: Optional[str]
    is_completed: bool
    created_at: datetime
    completed_at: Optional[datetime]
    priority: Priority


class NewTask(TypedDict):
    """A TaskEntity that has not been assigned an id yet."""

    title: str
    description: Optional[str]
    is_completed: bool
    created_at: datetime
    completed_at: Optional[datetime]
    priority: Priority
