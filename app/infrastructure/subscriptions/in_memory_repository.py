"""
Adapter: In-process subscription repository.

Implements SubscriptionRepository port with a dictionary.
Used by the test suite and for running the API without a database
(``STORAGE_BACKEND=memory``). Data lives only as long as the process.
"""

import threading
from dataclasses import replace
from typing import Optional
from uuid import UUID, uuid4

from app.domain.subscriptions.entities import (
    CreateInput,
    ListFilter,
    Subscription,
    UpdateInput,
)
from app.domain.subscriptions.errors import SubscriptionNotFoundError
from app.domain.subscriptions.ports import SubscriptionRepository


class InMemorySubscriptionRepository(SubscriptionRepository):
    """Dictionary-backed repository with the same query semantics as SQL.

    ``timeout`` is accepted for interface compatibility and ignored: no
    call here can block.
    """

    def __init__(self) -> None:
        self._rows: dict[UUID, Subscription] = {}
        self._lock = threading.Lock()

    def create(
        self, data: CreateInput, timeout: Optional[float] = None
    ) -> Subscription:
        subscription = Subscription(
            id=uuid4(),
            service_name=data.service_name,
            price=data.price,
            user_id=data.user_id,
            start_month=data.start_month,
            end_month=data.end_month,
        )
        with self._lock:
            self._rows[subscription.id] = subscription
        return subscription

    def get(
        self, subscription_id: UUID, timeout: Optional[float] = None
    ) -> Subscription:
        with self._lock:
            subscription = self._rows.get(subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
        return subscription

    def update(
        self,
        subscription_id: UUID,
        data: UpdateInput,
        timeout: Optional[float] = None,
    ) -> Subscription:
        with self._lock:
            current = self._rows.get(subscription_id)
            if current is None:
                raise SubscriptionNotFoundError(subscription_id)
            updated = replace(
                current,
                service_name=data.service_name,
                price=data.price,
                start_month=data.start_month,
                end_month=data.end_month,
            )
            self._rows[subscription_id] = updated
        return updated

    def delete(
        self, subscription_id: UUID, timeout: Optional[float] = None
    ) -> None:
        with self._lock:
            if self._rows.pop(subscription_id, None) is None:
                raise SubscriptionNotFoundError(subscription_id)

    def list(
        self, filters: ListFilter, timeout: Optional[float] = None
    ) -> list[Subscription]:
        with self._lock:
            rows = [s for s in self._rows.values() if _matches(s, filters)]

        rows.sort(key=lambda s: (s.start_month, str(s.id)))

        if filters.offset > 0:
            rows = rows[filters.offset:]
        if filters.limit > 0:
            rows = rows[: filters.limit]
        return rows


def _matches(subscription: Subscription, filters: ListFilter) -> bool:
    if filters.user_id is not None and subscription.user_id != filters.user_id:
        return False
    if filters.service_name is not None and subscription.service_name != filters.service_name:
        return False
    if filters.start_month_from is not None and subscription.start_month < filters.start_month_from:
        return False
    if filters.start_month_to is not None and subscription.start_month > filters.start_month_to:
        return False
    if filters.has_active_period:
        if subscription.start_month > filters.active_period_to:
            return False
        if subscription.end_month is not None and subscription.end_month < filters.active_period_from:
            return False
    return True
