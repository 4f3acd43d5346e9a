from dataclasses import dataclass

import pytest

from task_api.cqrs import (
    CancellationToken,
    Command,
    CommandHandler,
    DuplicateHandlerRegistration,
    HandlerContractViolation,
    HandlerNotFound,
    HandlerRegistry,
    Query,
    QueryHandler,
    RegistrySealed,
)
from task_api.repositories import InMemoryRepository
from task_api.tasks import TASK_REQUEST_KINDS, build_registry


@dataclass(frozen=True)
class Ping(Query[str]):
    pass


@dataclass(frozen=True)
class Pong(Query[str]):
    pass


@dataclass(frozen=True)
class Bump(Command[int]):
    pass


class PingHandler(QueryHandler[Ping, str]):
    request_type = Ping

    def handle(self, query: Ping, cancel: CancellationToken) -> str:
        return "pong"


class BumpHandler(CommandHandler[Bump, int]):
    request_type = Bump

    def handle(self, command: Bump, cancel: CancellationToken) -> int:
        return 1


class UntypedQueryHandler(QueryHandler[Pong, str]):
    def handle(self, query: Pong, cancel: CancellationToken) -> str:
        return "ok"


class TestRegister:
    def test_register_and_resolve(self):
        registry = HandlerRegistry()
        handler = PingHandler()
        registry.register(Ping, handler)
        assert registry.resolve(Ping) is handler
        assert Ping in registry
        assert len(registry) == 1
        assert registry.kinds() == [Ping]

    def test_resolve_missing_returns_none(self):
        assert HandlerRegistry().resolve(Ping) is None

    def test_duplicate_registration_rejected(self):
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler())
        with pytest.raises(DuplicateHandlerRegistration):
            registry.register(Ping, PingHandler())

    def test_handler_without_declared_type_is_accepted(self):
        registry = HandlerRegistry()
        registry.register(Pong, UntypedQueryHandler())
        assert Pong in registry


class TestContract:
    def test_command_handler_for_query_rejected(self):
        with pytest.raises(HandlerContractViolation):
            HandlerRegistry().register(Ping, BumpHandler())

    def test_declared_type_mismatch_rejected(self):
        with pytest.raises(HandlerContractViolation):
            HandlerRegistry().register(Pong, PingHandler())

    def test_non_request_kind_rejected(self):
        with pytest.raises(HandlerContractViolation):
            HandlerRegistry().register(str, PingHandler())

    def test_plain_callable_rejected(self):
        with pytest.raises(HandlerContractViolation):
            HandlerRegistry().register(Ping, lambda q, c: "pong")


class TestLifecycle:
    def test_verify_lists_every_missing_kind(self):
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler())
        with pytest.raises(HandlerNotFound) as excinfo:
            registry.verify([Ping, Pong, Bump])
        assert set(excinfo.value.kinds) == {Pong, Bump}

    def test_verify_passes_when_complete(self):
        registry = HandlerRegistry()
        registry.register(Ping, PingHandler())
        registry.verify([Ping])

    def test_sealed_registry_refuses_registration(self):
        registry = HandlerRegistry()
        registry.seal()
        assert registry.sealed
        with pytest.raises(RegistrySealed):
            registry.register(Ping, PingHandler())


class TestTaskWiring:
    def test_every_task_request_kind_is_wired(self):
        registry = build_registry(InMemoryRepository())
        assert set(registry.kinds()) == set(TASK_REQUEST_KINDS)
        assert registry.sealed
