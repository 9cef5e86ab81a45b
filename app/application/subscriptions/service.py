"""
Subscription service: lifecycle orchestration and spend aggregation.

Input: CreateInput, UpdateInput, ListFilter, SummaryFilter, subscription ids.
Output: Subscription records, lists of them, or an integer total.
Side effects: Writes through the SubscriptionRepository port.
Failure cases: SubscriptionNotFoundError, InvalidSubscriptionError,
PersistenceError.
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional, TypeVar
from uuid import UUID

from app.domain.subscriptions.entities import (
    CreateInput,
    ListFilter,
    Subscription,
    SummaryFilter,
    UpdateInput,
)
from app.domain.subscriptions.errors import (
    InvalidSubscriptionError,
    PersistenceError,
    SubscriptionDomainError,
    SubscriptionNotFoundError,
)
from app.domain.subscriptions.months import billed_months, month_start
from app.domain.subscriptions.ports import SubscriptionRepository

_Input = TypeVar("_Input", CreateInput, UpdateInput)


class SubscriptionService:
    """Orchestrates subscription CRUD and computes spend over a month window.

    The service is stateless: it holds only its collaborators, so one
    instance may serve many requests. Every public method accepts a
    keyword-only ``timeout`` that is forwarded to each repository call.
    Repository failures are never retried.
    """

    def __init__(
        self,
        repository: SubscriptionRepository,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Persistence port for subscriptions.
            logger: Diagnostics sink. Defaults to this module's logger.
        """
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)

    def create(
        self, data: CreateInput, *, timeout: Optional[float] = None
    ) -> Subscription:
        """Validate and persist a new subscription.

        Raises:
            InvalidSubscriptionError: If price is negative, the name is
                blank, or end_month precedes start_month.
            PersistenceError: If the repository fails.
        """
        data = _validated(data)
        self._logger.info(
            "Creating subscription: service=%s, user_id=%s",
            data.service_name,
            data.user_id,
        )
        with self._repository_call("subscriptions.create"):
            return self._repository.create(data, timeout=timeout)

    def get(
        self, subscription_id: UUID, *, timeout: Optional[float] = None
    ) -> Subscription:
        """Return one subscription.

        Raises:
            SubscriptionNotFoundError: If the id is unknown.
            PersistenceError: If the repository fails.
        """
        with self._repository_call("subscriptions.get", subscription_id):
            return self._repository.get(subscription_id, timeout=timeout)

    def update(
        self,
        subscription_id: UUID,
        data: UpdateInput,
        *,
        timeout: Optional[float] = None,
    ) -> Subscription:
        """Replace service_name, price, start_month and end_month.

        The id and user_id of the subscription never change.

        Raises:
            InvalidSubscriptionError: On the same rules as ``create``.
            SubscriptionNotFoundError: If the id is unknown.
            PersistenceError: If the repository fails.
        """
        data = _validated(data)
        self._logger.info("Updating subscription: id=%s", subscription_id)
        with self._repository_call("subscriptions.update", subscription_id):
            return self._repository.update(subscription_id, data, timeout=timeout)

    def delete(
        self, subscription_id: UUID, *, timeout: Optional[float] = None
    ) -> None:
        """Delete one subscription.

        Raises:
            SubscriptionNotFoundError: If nothing was deleted.
            PersistenceError: If the repository fails.
        """
        self._logger.info("Deleting subscription: id=%s", subscription_id)
        with self._repository_call("subscriptions.delete", subscription_id):
            self._repository.delete(subscription_id, timeout=timeout)

    def list(
        self, filters: ListFilter, *, timeout: Optional[float] = None
    ) -> list[Subscription]:
        """Return matching subscriptions, possibly an empty list."""
        with self._repository_call("subscriptions.list"):
            return self._repository.list(filters, timeout=timeout)

    def sum(
        self, filters: SummaryFilter, *, timeout: Optional[float] = None
    ) -> int:
        """Total the amount billed inside ``[period_start, period_end]``.

        Each subscription contributes ``price`` for every calendar month
        its active interval shares with the window. Candidates come from
        the repository's overlap filter, but the overlap is recomputed
        here for every candidate; the repository filter only narrows the
        rows fetched.

        Raises:
            InvalidSubscriptionError: If period_end precedes period_start.
            PersistenceError: If the repository fails.
        """
        period_start = month_start(filters.period_start)
        period_end = month_start(filters.period_end)
        if period_end < period_start:
            raise InvalidSubscriptionError("period end precedes period start")

        candidates_filter = ListFilter(
            user_id=filters.user_id,
            service_name=filters.service_name,
            active_period_from=period_start,
            active_period_to=period_end,
        )
        with self._repository_call("subscriptions.sum"):
            candidates = self._repository.list(candidates_filter, timeout=timeout)

        total = 0
        for subscription in candidates:
            months = billed_months(subscription, period_start, period_end)
            if months == 0:
                continue
            total += subscription.price * months

        self._logger.debug(
            "Summed %d candidate subscriptions for %s..%s: total=%d",
            len(candidates),
            period_start,
            period_end,
            total,
        )
        return total

    @contextmanager
    def _repository_call(
        self, operation: str, subscription_id: Optional[UUID] = None
    ) -> Iterator[None]:
        """Pass domain errors through and wrap anything else as PersistenceError."""
        try:
            yield
        except SubscriptionNotFoundError:
            self._logger.warning("Subscription not found: id=%s", subscription_id)
            raise
        except SubscriptionDomainError as exc:
            self._logger.error("%s failed: %s", operation, exc.message)
            raise
        except Exception as exc:
            self._logger.error(
                "%s failed: %s: %s", operation, type(exc).__name__, exc
            )
            raise PersistenceError(operation, str(exc)) from exc


def _validated(data: _Input) -> _Input:
    """Check invariants and normalize month fields to the first of the month."""
    if not data.service_name or not data.service_name.strip():
        raise InvalidSubscriptionError("service name must not be empty")
    if data.price < 0:
        raise InvalidSubscriptionError("price must be non-negative")

    start = month_start(data.start_month)
    end = month_start(data.end_month) if data.end_month is not None else None
    if end is not None and end < start:
        raise InvalidSubscriptionError("end month precedes start month")

    return replace(data, start_month=start, end_month=end)
