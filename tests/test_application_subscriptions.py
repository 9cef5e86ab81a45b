"""
Tests for the subscriptions application layer (SubscriptionService).

Runs the service over the in-memory repository, and over mocked ports
where failure paths or call arguments need to be observed.
"""

import logging
from datetime import date
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from app.application.subscriptions.service import SubscriptionService
from app.domain.subscriptions.entities import (
    ListFilter,
    SummaryFilter,
    UpdateInput,
)
from app.domain.subscriptions.errors import (
    InvalidSubscriptionError,
    PersistenceError,
    SubscriptionNotFoundError,
)
from app.domain.subscriptions.ports import SubscriptionRepository


# ══════════════════════════════════════════════════════════════════════
# CRUD
# ══════════════════════════════════════════════════════════════════════


class TestCreateAndGet:
    """Tests for SubscriptionService.create and .get."""

    def test_get_returns_created_record(self, service, make_input) -> None:
        """Get(Create(input).id) returns the input fields plus an id."""
        data = make_input(end_month=date(2025, 12, 1))
        created = service.create(data)

        fetched = service.get(created.id)

        assert fetched == created
        assert fetched.service_name == data.service_name
        assert fetched.price == data.price
        assert fetched.user_id == data.user_id
        assert fetched.start_month == data.start_month
        assert fetched.end_month == data.end_month

    def test_create_normalizes_months(self, service, make_input) -> None:
        """Day-of-month is dropped before the record is stored."""
        created = service.create(
            make_input(start_month=date(2023, 5, 17), end_month=date(2023, 8, 31))
        )
        assert created.start_month == date(2023, 5, 1)
        assert created.end_month == date(2023, 8, 1)

    def test_create_rejects_negative_price(self, service, make_input) -> None:
        with pytest.raises(InvalidSubscriptionError):
            service.create(make_input(price=-1))

    def test_create_rejects_end_before_start(self, service, make_input) -> None:
        with pytest.raises(InvalidSubscriptionError):
            service.create(
                make_input(start_month=date(2023, 6, 1), end_month=date(2023, 5, 1))
            )

    def test_create_rejects_blank_service_name(self, service, make_input) -> None:
        with pytest.raises(InvalidSubscriptionError):
            service.create(make_input(service_name="   "))

    def test_create_accepts_same_start_and_end_month(self, service, make_input) -> None:
        created = service.create(
            make_input(start_month=date(2023, 6, 1), end_month=date(2023, 6, 20))
        )
        assert created.end_month == created.start_month

    def test_invalid_input_never_reaches_repository(self, make_input) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        service = SubscriptionService(repository=repo)

        with pytest.raises(InvalidSubscriptionError):
            service.create(make_input(price=-10))

        repo.create.assert_not_called()

    def test_get_unknown_id_raises_not_found(self, service) -> None:
        with pytest.raises(SubscriptionNotFoundError):
            service.get(uuid4())


class TestUpdate:
    """Tests for SubscriptionService.update."""

    def test_update_replaces_mutable_fields(self, service, make_input) -> None:
        created = service.create(make_input())
        data = UpdateInput(
            service_name="Spotify",
            price=199,
            start_month=date(2024, 2, 1),
            end_month=date(2024, 11, 1),
        )

        updated = service.update(created.id, data)

        assert updated.id == created.id
        assert updated.user_id == created.user_id
        assert updated.service_name == "Spotify"
        assert updated.price == 199
        assert updated.start_month == date(2024, 2, 1)
        assert updated.end_month == date(2024, 11, 1)
        assert service.get(created.id) == updated

    def test_update_can_clear_end_month(self, service, make_input) -> None:
        created = service.create(make_input(end_month=date(2026, 1, 1)))
        data = UpdateInput(
            service_name=created.service_name,
            price=created.price,
            start_month=created.start_month,
        )
        assert service.update(created.id, data).end_month is None

    def test_update_unknown_id_raises_not_found(self, service) -> None:
        data = UpdateInput(service_name="x", price=1, start_month=date(2023, 1, 1))
        with pytest.raises(SubscriptionNotFoundError):
            service.update(uuid4(), data)

    def test_update_validates_input(self, service, make_input) -> None:
        created = service.create(make_input())
        data = UpdateInput(service_name="x", price=-5, start_month=date(2023, 1, 1))
        with pytest.raises(InvalidSubscriptionError):
            service.update(created.id, data)


class TestDelete:
    """Tests for SubscriptionService.delete."""

    def test_get_after_delete_raises_not_found(self, service, make_input) -> None:
        created = service.create(make_input())
        service.delete(created.id)
        with pytest.raises(SubscriptionNotFoundError):
            service.get(created.id)

    def test_delete_unknown_id_raises_not_found(self, service) -> None:
        with pytest.raises(SubscriptionNotFoundError):
            service.delete(uuid4())


class TestList:
    """Tests for SubscriptionService.list."""

    def test_empty_result_is_not_an_error(self, service) -> None:
        assert service.list(ListFilter(user_id=uuid4())) == []

    def test_overlap_filter(self, service, make_input) -> None:
        """Jan–Jun 2023 overlaps May–Dec but not Jul–Dec."""
        created = service.create(
            make_input(start_month=date(2023, 1, 1), end_month=date(2023, 6, 1))
        )

        overlapping = service.list(
            ListFilter(active_period_from=date(2023, 5, 1), active_period_to=date(2023, 12, 1))
        )
        disjoint = service.list(
            ListFilter(active_period_from=date(2023, 7, 1), active_period_to=date(2023, 12, 1))
        )

        assert [s.id for s in overlapping] == [created.id]
        assert disjoint == []

    def test_list_is_idempotent_and_ordered(self, service, make_input) -> None:
        for month in (9, 2, 5, 2):
            service.create(make_input(start_month=date(2023, month, 1)))

        first = service.list(ListFilter())
        second = service.list(ListFilter())

        assert first == second
        assert [s.start_month.month for s in first] == [2, 2, 5, 9]

    def test_pagination(self, service, make_input) -> None:
        for month in range(1, 6):
            service.create(make_input(start_month=date(2023, month, 1)))

        page = service.list(ListFilter(limit=2, offset=1))

        assert [s.start_month.month for s in page] == [2, 3]


# ══════════════════════════════════════════════════════════════════════
# Sum
# ══════════════════════════════════════════════════════════════════════


class TestSum:
    """Tests for SubscriptionService.sum."""

    def test_open_ended_subscription_clamped_to_window(self, service, make_input) -> None:
        service.create(make_input(price=100, start_month=date(2023, 1, 1)))
        total = service.sum(
            SummaryFilter(period_start=date(2023, 1, 1), period_end=date(2023, 3, 1))
        )
        assert total == 300

    def test_single_month_subscription(self, service, make_input) -> None:
        service.create(
            make_input(price=50, start_month=date(2023, 6, 1), end_month=date(2023, 6, 1))
        )
        total = service.sum(
            SummaryFilter(period_start=date(2023, 1, 1), period_end=date(2023, 12, 1))
        )
        assert total == 50

    def test_subscription_after_window_contributes_nothing(self, service, make_input) -> None:
        service.create(make_input(price=999, start_month=date(2024, 1, 1)))
        total = service.sum(
            SummaryFilter(period_start=date(2023, 1, 1), period_end=date(2023, 12, 1))
        )
        assert total == 0

    def test_empty_set_sums_to_zero(self, service) -> None:
        total = service.sum(
            SummaryFilter(period_start=date(2023, 1, 1), period_end=date(2023, 12, 1))
        )
        assert total == 0

    def test_filters_by_user_and_service(self, service, make_input) -> None:
        user_id = uuid4()
        service.create(make_input(user_id=user_id, service_name="Netflix", price=10))
        service.create(make_input(user_id=user_id, service_name="Spotify", price=20))
        service.create(make_input(service_name="Netflix", price=40))

        window = dict(period_start=date(2025, 7, 1), period_end=date(2025, 8, 1))

        assert service.sum(SummaryFilter(user_id=user_id, **window)) == 60
        assert service.sum(SummaryFilter(service_name="Netflix", **window)) == 100
        assert (
            service.sum(SummaryFilter(user_id=user_id, service_name="Netflix", **window))
            == 20
        )

    def test_overlap_recomputed_even_if_repository_over_returns(self, make_input) -> None:
        """Candidates outside the window contribute 0 regardless of the pre-filter."""
        repo = MagicMock(spec=SubscriptionRepository)
        inside = MagicMock(price=10, start_month=date(2023, 2, 1), end_month=None)
        outside = MagicMock(price=1000, start_month=date(2025, 1, 1), end_month=None)
        repo.list.return_value = [inside, outside]
        service = SubscriptionService(repository=repo)

        total = service.sum(
            SummaryFilter(period_start=date(2023, 1, 1), period_end=date(2023, 4, 1))
        )

        assert total == 30

    def test_sum_requests_overlap_candidates(self) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        repo.list.return_value = []
        service = SubscriptionService(repository=repo)
        user_id = uuid4()

        service.sum(
            SummaryFilter(
                period_start=date(2023, 1, 15),
                period_end=date(2023, 3, 2),
                user_id=user_id,
                service_name="Netflix",
            ),
            timeout=2.5,
        )

        repo.list.assert_called_once_with(
            ListFilter(
                user_id=user_id,
                service_name="Netflix",
                active_period_from=date(2023, 1, 1),
                active_period_to=date(2023, 3, 1),
            ),
            timeout=2.5,
        )

    def test_inverted_window_rejected(self, service) -> None:
        with pytest.raises(InvalidSubscriptionError):
            service.sum(
                SummaryFilter(period_start=date(2023, 5, 1), period_end=date(2023, 4, 1))
            )


# ══════════════════════════════════════════════════════════════════════
# Error propagation and context
# ══════════════════════════════════════════════════════════════════════


class TestRepositoryFailures:
    """Repository errors are wrapped with the operation name, never retried."""

    def test_unexpected_error_wrapped_as_persistence_error(self, make_input) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        repo.create.side_effect = ConnectionError("connection refused")
        service = SubscriptionService(repository=repo)

        with pytest.raises(PersistenceError) as exc_info:
            service.create(make_input())

        assert exc_info.value.operation == "subscriptions.create"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert repo.create.call_count == 1

    def test_persistence_error_passes_through_unchanged(self) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        original = PersistenceError("subscriptions.list", "timeout")
        repo.list.side_effect = original
        service = SubscriptionService(repository=repo)

        with pytest.raises(PersistenceError) as exc_info:
            service.list(ListFilter())

        assert exc_info.value is original

    def test_sum_is_all_or_nothing(self) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        repo.list.side_effect = RuntimeError("boom")
        service = SubscriptionService(repository=repo)

        with pytest.raises(PersistenceError) as exc_info:
            service.sum(
                SummaryFilter(period_start=date(2023, 1, 1), period_end=date(2023, 2, 1))
            )

        assert exc_info.value.operation == "subscriptions.sum"

    def test_timeout_forwarded_to_every_call(self, make_input) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        service = SubscriptionService(repository=repo)
        subscription_id = uuid4()
        update = UpdateInput(service_name="x", price=1, start_month=date(2023, 1, 1))

        service.create(make_input(), timeout=1.5)
        service.get(subscription_id, timeout=1.5)
        service.update(subscription_id, update, timeout=1.5)
        service.delete(subscription_id, timeout=1.5)
        service.list(ListFilter(), timeout=1.5)

        for call in (repo.create, repo.get, repo.update, repo.delete, repo.list):
            assert call.call_args.kwargs["timeout"] == 1.5

    def test_not_found_logged_as_warning(self, caplog) -> None:
        repo = MagicMock(spec=SubscriptionRepository)
        subscription_id = uuid4()
        repo.get.side_effect = SubscriptionNotFoundError(subscription_id)
        service = SubscriptionService(
            repository=repo, logger=logging.getLogger("tests.subscriptions")
        )

        with caplog.at_level(logging.WARNING, logger="tests.subscriptions"):
            with pytest.raises(SubscriptionNotFoundError):
                service.get(subscription_id)

        assert any(
            r.levelno == logging.WARNING and str(subscription_id) in r.getMessage()
            for r in caplog.records
        )
