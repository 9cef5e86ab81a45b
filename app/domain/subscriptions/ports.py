"""
Port interfaces (ABCs) for the subscriptions bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.

Every method accepts ``timeout``: a per-call deadline in seconds that the
adapter must honour (or ignore if it cannot block). ``None`` means no
deadline beyond the adapter's own defaults.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from app.domain.subscriptions.entities import (
    CreateInput,
    ListFilter,
    Subscription,
    UpdateInput,
)


class SubscriptionRepository(ABC):
    """Port for persisting and querying subscriptions."""

    @abstractmethod
    def create(
        self, data: CreateInput, timeout: Optional[float] = None
    ) -> Subscription:
        """Persist a new subscription and return it with its generated id."""
        raise NotImplementedError

    @abstractmethod
    def get(
        self, subscription_id: UUID, timeout: Optional[float] = None
    ) -> Subscription:
        """Return a subscription by id.

        Raises:
            SubscriptionNotFoundError: If no subscription has this id.
        """
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        subscription_id: UUID,
        data: UpdateInput,
        timeout: Optional[float] = None,
    ) -> Subscription:
        """Replace the mutable fields of a subscription and return the result.

        Raises:
            SubscriptionNotFoundError: If no subscription has this id.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(
        self, subscription_id: UUID, timeout: Optional[float] = None
    ) -> None:
        """Remove a subscription.

        Raises:
            SubscriptionNotFoundError: If nothing was removed.
        """
        raise NotImplementedError

    @abstractmethod
    def list(
        self, filters: ListFilter, timeout: Optional[float] = None
    ) -> list[Subscription]:
        """Return subscriptions matching the filter.

        Matching rules:
            - exact match on user_id and service_name when set;
            - inclusive range on start_month;
            - when both active period bounds are set, only subscriptions
              whose [start_month, end_month] interval intersects the window.

        Returns:
            Subscriptions ordered by start_month ascending (ties by id),
            with limit/offset applied after ordering.
        """
        raise NotImplementedError
