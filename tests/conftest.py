import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from task_api.application import create_app  # noqa: E402
from task_api.repositories import InMemoryRepository  # noqa: E402
from task_api.settings import Settings  # noqa: E402

from .helpers import FakeClock  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(persistence_backend="memory", seed_sample_data=False)


@pytest.fixture
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(settings, repo) -> TestClient:
    return TestClient(create_app(settings, repo=repo))
