from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..schemas import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH


class TaskValidationError(ValueError):
    """
    Field-level validation failure raised by a handler.

    `errors` mirrors the shape of pydantic's error list so the HTTP layer can
    report both kinds of failure the same way.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def errors(self) -> List[Dict[str, Any]]:
        return [{"loc": ["body", self.field], "msg": self.message, "type": "value_error"}]


def clean_title(title: Optional[str], required: bool) -> Optional[str]:
    """
    Trim a title and check its length.

    A missing or blank title is an error when `required`. Otherwise None and
    whitespace-only titles come back as None ("no change"), while an empty
    string is still an error.
    """
    if title == "" and not required:
        raise TaskValidationError("title", "Title must be between 1 and 200 characters.")
    s = (title or "").strip()
    if not s:
        if required:
            raise TaskValidationError("title", "Title must be between 1 and 200 characters.")
        return None
    if len(s) > TITLE_MAX_LENGTH:
        raise TaskValidationError("title", "Title must be between 1 and 200 characters.")
    return s


def check_description(description: Optional[str]) -> Optional[str]:
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise TaskValidationError("description", "Description cannot exceed 1000 characters.")
    return description
