from __future__ import annotations

from threading import Event


class OperationCancelled(Exception):
    """Raised by a store or handler that observed a cancelled token."""


# PUBLIC_INTERFACE
class CancellationToken:
    """
    Cooperative cancellation signal passed from the entry point through the
    dispatcher and handler down to the store call.

    Cancelling only sets a flag; whoever holds the token decides where to check it.
    """

    def __init__(self) -> None:
        self._event = Event()

    @classmethod
    def none(cls) -> "CancellationToken":
        """A fresh token that nobody is going to cancel."""
        return cls()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("operation was cancelled")
