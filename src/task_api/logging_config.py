"""
structlog configuration for the task backend.

console mode: human readable output for local development
json mode: one JSON object per line for log shipping
"""
from __future__ import annotations

import logging
from typing import Optional

import structlog

from .settings import Settings

# The root handler installed by the last setup_logging call
_installed_handler: Optional[logging.Handler] = None


# PUBLIC_INTERFACE
def setup_logging(settings: Settings) -> None:
    """
    Configure structlog and route the standard library logging (uvicorn,
    fastapi) through the same processor chain.

    Safe to call more than once: each call swaps out the handler the previous
    call installed and leaves handlers owned by the host process alone.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        # Tracebacks become a string field instead of a pretty block
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    global _installed_handler
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if _installed_handler is not None:
        root_logger.removeHandler(_installed_handler)
    root_logger.addHandler(handler)
    _installed_handler = handler
    root_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
