from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, Optional, TypeVar

from .cancellation import CancellationToken
from .requests import Command, Query, VoidCommand

Q = TypeVar("Q", bound=Query)
C = TypeVar("C", bound=Command)
V = TypeVar("V", bound=VoidCommand)
R = TypeVar("R")


class QueryHandler(ABC, Generic[Q, R]):
    """Serves exactly one Query kind."""

    request_type: ClassVar[Optional[type]] = None

    @abstractmethod
    def handle(self, query: Q, cancel: CancellationToken) -> R:
        """Answer the query."""


class CommandHandler(ABC, Generic[C, R]):
    """Serves exactly one value-returning Command kind."""

    request_type: ClassVar[Optional[type]] = None

    @abstractmethod
    def handle(self, command: C, cancel: CancellationToken) -> R:
        """Apply the command and return its result."""


class VoidCommandHandler(ABC, Generic[V]):
    """Serves exactly one VoidCommand kind."""

    request_type: ClassVar[Optional[type]] = None

    @abstractmethod
    def handle(self, command: V, cancel: CancellationToken) -> None:
        """Apply the command."""


# Handler base expected for each request category
HANDLER_BASES = {
    Query: QueryHandler,
    Command: CommandHandler,
    VoidCommand: VoidCommandHandler,
}
