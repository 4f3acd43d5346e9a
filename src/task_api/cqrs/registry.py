from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog

from .errors import (
    DuplicateHandlerRegistration,
    HandlerContractViolation,
    HandlerNotFound,
    RegistrySealed,
)
from .handlers import HANDLER_BASES
from .requests import request_category

logger = structlog.get_logger(__name__)


# PUBLIC_INTERFACE
class HandlerRegistry:
    """
    Maps each concrete request type to the single handler that serves it.

    Populated once at startup, then sealed. After sealing the mapping is never
    mutated, so concurrent lookups need no locking.
    """

    def __init__(self) -> None:
        self._handlers: Dict[type, Any] = {}
        self._sealed = False

    def register(self, kind: type, handler: Any) -> None:
        """
        Bind a request type to its handler.

        Raises:
            RegistrySealed: the registry was already sealed.
            DuplicateHandlerRegistration: the type already has a handler.
            HandlerContractViolation: the handler cannot serve this request type.
        """
        if self._sealed:
            raise RegistrySealed(f"Cannot register {kind.__name__}: registry is sealed")
        if kind in self._handlers:
            raise DuplicateHandlerRegistration(kind)
        self._check_contract(kind, handler)
        self._handlers[kind] = handler
        logger.debug("handler_registered", request_kind=kind.__name__, handler=type(handler).__name__)

    def resolve(self, kind: type) -> Optional[Any]:
        """Return the handler for exactly this type, or None."""
        return self._handlers.get(kind)

    def verify(self, expected_kinds: Iterable[type]) -> None:
        """
        Fail fast if any expected request type has no handler.

        Raises:
            HandlerNotFound listing every missing type.
        """
        missing = [k for k in expected_kinds if k not in self._handlers]
        if missing:
            raise HandlerNotFound(missing)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def kinds(self) -> List[type]:
        return list(self._handlers)

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    @staticmethod
    def _check_contract(kind: type, handler: Any) -> None:
        try:
            category = request_category(kind)
        except TypeError as e:
            raise HandlerContractViolation(str(e)) from e

        expected_base = HANDLER_BASES[category]
        if not isinstance(handler, expected_base):
            raise HandlerContractViolation(
                f"{type(handler).__name__} is not a {expected_base.__name__}; "
                f"it cannot serve {kind.__name__}"
            )

        declared = getattr(handler, "request_type", None)
        if declared is not None and declared is not kind:
            raise HandlerContractViolation(
                f"{type(handler).__name__} declares request_type {declared.__name__}, "
                f"but was registered for {kind.__name__}"
            )
