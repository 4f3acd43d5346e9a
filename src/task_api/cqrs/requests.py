"""
Request kinds.

Concrete requests are frozen dataclasses deriving from one of these markers;
the type parameter documents the result the matching handler produces.
"""
from __future__ import annotations

from typing import Generic, TypeVar

R = TypeVar("R")


class Query(Generic[R]):
    """Read-only request returning an R."""


class Command(Generic[R]):
    """State-changing request returning an R."""


class VoidCommand(Command[None]):
    """State-changing request with no meaningful result."""


def request_category(kind: type) -> type:
    """Return the marker class (Query, VoidCommand or Command) a request kind derives from."""
    if issubclass(kind, Query):
        return Query
    if issubclass(kind, VoidCommand):
        return VoidCommand
    if issubclass(kind, Command):
        return Command
    raise TypeError(f"{kind.__name__} is not a Query or Command type")
