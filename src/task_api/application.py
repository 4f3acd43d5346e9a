"""
Application factory.

Importing this module has no side effects; `task_api.main` builds the
served app from the environment.
"""
from __future__ import annotations

from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .cqrs.cancellation import CancellationToken
from .logging_config import setup_logging
from .repositories import Repository, get_repository
from .routers import tasks as tasks_router
from .settings import Settings, get_settings
from .tasks.handlers import Clock, utc_now
from .tasks.requests import SeedSampleTasksCommand
from .tasks.validation import TaskValidationError
from .tasks.wiring import build_dispatcher

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred while processing the request."

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "CRUD operations for tasks, filterable by completion state and priority.",
    },
]


def _validation_response(detail: list) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": detail,
        },
    )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repo: Optional[Repository] = None,
    clock: Clock = utc_now,
) -> FastAPI:
    """
    Build the FastAPI application.

    The dispatcher and its handler registry are wired (and verified) here, so a
    missing handler fails app creation rather than the first request using it.

    Args:
        settings: explicit settings; read from the environment when omitted.
        repo: explicit store; built from settings when omitted.
        clock: time source for handlers that stamp timestamps.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    repo = repo if repo is not None else get_repository(settings)
    dispatcher = build_dispatcher(repo, clock)
    if settings.seed_sample_data:
        dispatcher.send(SeedSampleTasksCommand(), CancellationToken.none())

    app = FastAPI(
        title="Task Backend",
        description="Backend API service for tracking tasks, routed through a command/query dispatcher.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        # ctx may hold the raised exception object, which is not JSON serializable
        detail = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
        return _validation_response(detail)

    @app.exception_handler(TaskValidationError)
    async def task_validation_exception_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
        return _validation_response(exc.errors())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
        """
        Last-resort boundary: log with traceback, answer with a fixed message.
        """
        logger.exception(
            "unhandled_error",
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        return PlainTextResponse(INTERNAL_ERROR_MESSAGE, status_code=500)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(tasks_router.router)
    logger.info(
        "app_created",
        backend=settings.persistence_backend,
        seeded=settings.seed_sample_data,
    )
    return app
