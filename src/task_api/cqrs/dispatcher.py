from __future__ import annotations

from typing import Any, TypeVar

import structlog

from .cancellation import CancellationToken
from .errors import HandlerContractViolation, HandlerNotFound
from .handlers import HANDLER_BASES
from .registry import HandlerRegistry
from .requests import Command, Query, VoidCommand

R = TypeVar("R")

logger = structlog.get_logger(__name__)


# PUBLIC_INTERFACE
class Dispatcher:
    """
    Routes a request to its handler by the request's exact runtime type.

    The dispatcher adds no behaviour of its own: it does not catch or wrap
    handler errors and it passes the cancellation token through unchanged.
    """

    def __init__(self, registry: HandlerRegistry) -> None:
        self._registry = registry

    def ask(self, query: Query[R], cancel: CancellationToken) -> R:
        """Run a query and return its result."""
        if not isinstance(query, Query):
            raise TypeError(f"ask() expects a Query, got {type(query).__name__}")
        return self._invoke(query, Query, cancel)

    def execute(self, command: Command[R], cancel: CancellationToken) -> R:
        """Run a value-returning command and return its result."""
        if not isinstance(command, Command) or isinstance(command, VoidCommand):
            raise TypeError(
                f"execute() expects a value-returning Command, got {type(command).__name__}"
            )
        return self._invoke(command, Command, cancel)

    def send(self, command: VoidCommand, cancel: CancellationToken) -> None:
        """Run a command that produces no result."""
        if not isinstance(command, VoidCommand):
            raise TypeError(f"send() expects a VoidCommand, got {type(command).__name__}")
        result = self._invoke(command, VoidCommand, cancel)
        if result is not None:
            raise HandlerContractViolation(
                f"Handler for {type(command).__name__} returned {type(result).__name__}, expected None"
            )

    def _invoke(self, request: Any, category: type, cancel: CancellationToken) -> Any:
        kind = type(request)
        handler = self._registry.resolve(kind)
        if handler is None:
            logger.error("handler_not_found", request_kind=kind.__name__)
            raise HandlerNotFound([kind])

        # register() enforces this too
        if not isinstance(handler, HANDLER_BASES[category]):
            logger.error(
                "handler_contract_violation",
                request_kind=kind.__name__,
                handler=type(handler).__name__,
            )
            raise HandlerContractViolation(
                f"{type(handler).__name__} cannot serve {kind.__name__}"
            )

        logger.debug("dispatch", request_kind=kind.__name__, handler=type(handler).__name__)
        return handler.handle(request, cancel)
