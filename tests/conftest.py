"""
Shared pytest fixtures.

The environment is pinned before the application is imported so that
settings resolve to the in-memory store with rate limiting off.
"""

import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import Iterator  # noqa: E402
from datetime import date  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from app.application.subscriptions.service import SubscriptionService  # noqa: E402
from app.domain.subscriptions.entities import CreateInput  # noqa: E402
from app.infrastructure.db.engine import build_engine  # noqa: E402
from app.infrastructure.db.migrations import apply_migrations  # noqa: E402
from app.infrastructure.subscriptions.in_memory_repository import (  # noqa: E402
    InMemorySubscriptionRepository,
)
from app.infrastructure.subscriptions.sql_repository import (  # noqa: E402
    SqlSubscriptionRepository,
)
from app.interfaces.subscriptions.dependencies import (  # noqa: E402
    get_subscription_repository,
)
from app.main import app  # noqa: E402


def _make_input(
    service_name: str = "Yandex Plus",
    price: int = 400,
    user_id: UUID | None = None,
    start_month: date = date(2025, 7, 1),
    end_month: date | None = None,
) -> CreateInput:
    """Build a CreateInput with sensible defaults."""
    return CreateInput(
        service_name=service_name,
        price=price,
        user_id=user_id or uuid4(),
        start_month=start_month,
        end_month=end_month,
    )


@pytest.fixture
def make_input():
    """Factory for CreateInput values."""
    return _make_input


@pytest.fixture
def repository() -> InMemorySubscriptionRepository:
    """Fresh in-memory repository."""
    return InMemorySubscriptionRepository()


@pytest.fixture
def service(repository: InMemorySubscriptionRepository) -> SubscriptionService:
    """SubscriptionService over the in-memory repository."""
    return SubscriptionService(repository=repository)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    """In-memory SQLite engine with all migrations applied."""
    engine = build_engine("sqlite://")
    apply_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_repository(sqlite_engine: Engine) -> SqlSubscriptionRepository:
    """SQL repository bound to the migrated SQLite engine."""
    return SqlSubscriptionRepository(engine=sqlite_engine)


@pytest.fixture
def client(repository: InMemorySubscriptionRepository) -> Iterator[TestClient]:
    """TestClient whose routes use the per-test in-memory repository."""
    app.dependency_overrides[get_subscription_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()
