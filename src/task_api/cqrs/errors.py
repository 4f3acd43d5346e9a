from __future__ import annotations

from typing import Iterable


class WiringError(RuntimeError):
    """
    Base class for dispatcher/registry configuration bugs.

    These are never user errors; the HTTP boundary turns them into a 500.
    """


class HandlerNotFound(WiringError):
    """No handler is registered for one or more request kinds."""

    def __init__(self, kinds: Iterable[type]) -> None:
        self.kinds = tuple(kinds)
        names = ", ".join(k.__name__ for k in self.kinds)
        super().__init__(f"No handler registered for request type(s): {names}")


class HandlerContractViolation(WiringError):
    """A handler does not fulfil the contract of the request kind it is bound to."""


class DuplicateHandlerRegistration(WiringError):
    """A request kind was registered twice."""

    def __init__(self, kind: type) -> None:
        self.kind = kind
        super().__init__(f"A handler is already registered for {kind.__name__}")


class RegistrySealed(WiringError):
    """Registration attempted after the registry was sealed at startup."""
