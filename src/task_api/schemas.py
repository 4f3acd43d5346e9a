from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Priority

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


def _parse_priority(v: object) -> Optional[Priority]:
    if v is None:
        return None
    return Priority.parse(v)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new Task.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "priority": 2,
            }
        },
    )

    title: str = Field(..., description="Short title for the task (1-200 characters)")
    description: Optional[str] = Field(
        default=None,
        description="Optional detailed description",
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    priority: Priority = Field(
        default=Priority.MEDIUM,
        description="1 (Low), 2 (Medium) or 3 (High); names are accepted too",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        s = v.strip()
        if not (1 <= len(s) <= TITLE_MAX_LENGTH):
            raise ValueError("Title must be between 1 and 200 characters.")
        return s

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, v: object) -> Optional[Priority]:
        return _parse_priority(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating an existing Task.
    All fields are optional; only provided, non-null fields are applied.
    A whitespace-only title counts as not provided; an empty one is invalid.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "isCompleted": True,
                "priority": 3,
            }
        },
    )

    title: Optional[str] = Field(default=None, description="Short title for the task")
    description: Optional[str] = Field(
        default=None,
        description="Detailed description; an empty string clears it",
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    is_completed: Optional[bool] = Field(default=None, description="Completion status flag")
    priority: Optional[Priority] = Field(default=None, description="New priority level")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """
        An empty string is rejected. A whitespace-only title counts as absent;
        anything else is stripped and held to the 200 char limit.
        """
        if v is None:
            return v
        if v == "":
            raise ValueError("Title must be between 1 and 200 characters.")
        s = v.strip()
        if not s:
            return None
        if len(s) > TITLE_MAX_LENGTH:
            raise ValueError("Title must be between 1 and 200 characters.")
        return s

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, v: object) -> Optional[Priority]:
        return _parse_priority(v)


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "isCompleted": True,
                "createdAt": "2025-01-25T10:15:30.123456Z",
                "completedAt": "2025-01-26T09:00:00.000001Z",
                "priority": 2,
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    is_completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    completed_at: Optional[datetime] = Field(
        default=None, description="Completion timestamp (UTC); null while the task is open"
    )
    priority: Priority = Field(..., description="1 (Low), 2 (Medium) or 3 (High)")
