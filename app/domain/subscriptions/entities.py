"""
Domain entities for the subscriptions bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.

Month values are plain ``date`` objects pinned to the first day of the
month. Day-of-month carries no meaning anywhere in the domain.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class Subscription:
    """A persisted subscription of one user to one paid service.

    Attributes:
        id: Identifier assigned at creation. Never changes.
        service_name: Label of the subscribed service.
        price: Monthly price in the smallest currency unit.
        user_id: Owning user. Never changes after creation.
        start_month: First billed month.
        end_month: Last billed month (inclusive), or None if ongoing.
    """

    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_month: date
    end_month: Optional[date] = None

    @property
    def is_open_ended(self) -> bool:
        """Return True when the subscription has no end month."""
        return self.end_month is None


@dataclass(frozen=True)
class CreateInput:
    """Fields required to create a subscription."""

    service_name: str
    price: int
    user_id: UUID
    start_month: date
    end_month: Optional[date] = None


@dataclass(frozen=True)
class UpdateInput:
    """Replacement fields for an existing subscription.

    ``user_id`` is intentionally absent: ownership is fixed at creation.
    """

    service_name: str
    price: int
    start_month: date
    end_month: Optional[date] = None


@dataclass(frozen=True)
class ListFilter:
    """Query parameters for listing subscriptions.

    Attributes:
        user_id: Exact match on the owning user.
        service_name: Exact match on the service label.
        start_month_from: Inclusive lower bound on start_month.
        start_month_to: Inclusive upper bound on start_month.
        active_period_from: Start of the overlap window.
        active_period_to: End of the overlap window. The overlap filter
            applies only when both bounds are set.
        limit: Maximum number of rows, 0 for no limit.
        offset: Number of rows to skip, 0 for none.
    """

    user_id: Optional[UUID] = None
    service_name: Optional[str] = None
    start_month_from: Optional[date] = None
    start_month_to: Optional[date] = None
    active_period_from: Optional[date] = None
    active_period_to: Optional[date] = None
    limit: int = 0
    offset: int = 0

    @property
    def has_active_period(self) -> bool:
        """Return True when both overlap window bounds are set."""
        return self.active_period_from is not None and self.active_period_to is not None


@dataclass(frozen=True)
class SummaryFilter:
    """Parameters for aggregating spend over an inclusive month window."""

    period_start: date
    period_end: date
    user_id: Optional[UUID] = None
    service_name: Optional[str] = None
