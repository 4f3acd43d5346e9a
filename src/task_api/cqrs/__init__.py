"""
Command/query dispatch: request markers, handler bases, the startup
registry and the dispatcher that routes on a request's runtime type.
"""

from .cancellation import CancellationToken, OperationCancelled
from .dispatcher import Dispatcher
from .errors import (
    DuplicateHandlerRegistration,
    HandlerContractViolation,
    HandlerNotFound,
    RegistrySealed,
    WiringError,
)
from .handlers import CommandHandler, QueryHandler, VoidCommandHandler
from .registry import HandlerRegistry
from .requests import Command, Query, VoidCommand

__all__ = [
    "CancellationToken",
    "Command",
    "CommandHandler",
    "Dispatcher",
    "DuplicateHandlerRegistration",
    "HandlerContractViolation",
    "HandlerNotFound",
    "HandlerRegistry",
    "OperationCancelled",
    "Query",
    "QueryHandler",
    "RegistrySealed",
    "VoidCommand",
    "VoidCommandHandler",
    "WiringError",
]
