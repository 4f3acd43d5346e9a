"""
Run the API with uvicorn.

Usage:
    python -m task_api
"""
from __future__ import annotations

import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    # log_config=None keeps uvicorn from replacing the structlog handlers
    uvicorn.run("task_api.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
