"""
ASGI entry point: `uvicorn task_api.main:app`.

Building the app reads the environment, configures logging and may seed the
store, so only import this module to serve. Tools that need an app of their
own use `task_api.application.create_app`.
"""
from __future__ import annotations

from .application import create_app

app = create_app()
