"""
Dependency injection for the subscriptions bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into the subscription service via constructor injection,
and parse query strings into domain filters.
These are the composition root for the subscriptions context.
"""

from datetime import date
from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends, Query

from app.application.subscriptions.service import SubscriptionService
from app.core.config import settings
from app.domain.subscriptions.entities import ListFilter, SummaryFilter
from app.domain.subscriptions.errors import InvalidSubscriptionError
from app.domain.subscriptions.ports import SubscriptionRepository
from app.infrastructure.db.engine import get_engine
from app.infrastructure.subscriptions.in_memory_repository import (
    InMemorySubscriptionRepository,
)
from app.infrastructure.subscriptions.sql_repository import SqlSubscriptionRepository
from app.interfaces.subscriptions.schemas import (
    MONTH_DESCRIPTION,
    parse_month,
)

MAX_PAGE_SIZE = 1000


@lru_cache(maxsize=1)
def _in_memory_repository() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


def get_subscription_repository() -> SubscriptionRepository:
    """Return the repository adapter selected by ``STORAGE_BACKEND``."""
    if settings.storage_backend == "memory":
        return _in_memory_repository()
    return SqlSubscriptionRepository(engine=get_engine())


def get_subscription_service(
    repository: SubscriptionRepository = Depends(get_subscription_repository),
) -> SubscriptionService:
    """Build SubscriptionService with its infrastructure dependencies."""
    return SubscriptionService(repository=repository)


def get_call_timeout() -> float:
    """Deadline, in seconds, applied to each repository call of a request."""
    return settings.db_statement_timeout_seconds


def _given(value: Optional[str]) -> Optional[str]:
    """Treat an empty query parameter as absent."""
    return value if value else None


def _query_month(name: str, value: Optional[str]) -> Optional[date]:
    value = _given(value)
    if value is None:
        return None
    try:
        return parse_month(value)
    except ValueError as exc:
        raise InvalidSubscriptionError(f"invalid {name} format, expected MM-YYYY") from exc


def _query_uuid(name: str, value: Optional[str]) -> Optional[UUID]:
    value = _given(value)
    if value is None:
        return None
    try:
        return UUID(value)
    except ValueError as exc:
        raise InvalidSubscriptionError(f"invalid {name}") from exc


def get_list_filter(
    user_id: Optional[str] = Query(default=None, description="Owning user (UUID)"),
    service_name: Optional[str] = Query(default=None, description="Exact service name"),
    start_date: Optional[str] = Query(
        default=None, description="Earliest start month, " + MONTH_DESCRIPTION
    ),
    end_date: Optional[str] = Query(
        default=None, description="Latest start month, " + MONTH_DESCRIPTION
    ),
    active_from: Optional[str] = Query(
        default=None, description="Active window start, " + MONTH_DESCRIPTION
    ),
    active_to: Optional[str] = Query(
        default=None, description="Active window end, " + MONTH_DESCRIPTION
    ),
    limit: int = Query(default=0, ge=0, le=MAX_PAGE_SIZE, description="0 means no limit"),
    offset: int = Query(default=0, ge=0),
) -> ListFilter:
    """Parse list query parameters into a ListFilter.

    Empty parameters (``?service_name=``) count as not given.
    """
    active_period_from = _query_month("active_from", active_from)
    active_period_to = _query_month("active_to", active_to)
    if (active_period_from is None) != (active_period_to is None):
        raise InvalidSubscriptionError("active_from and active_to must be given together")

    return ListFilter(
        user_id=_query_uuid("user_id", user_id),
        service_name=_given(service_name),
        start_month_from=_query_month("start_date", start_date),
        start_month_to=_query_month("end_date", end_date),
        active_period_from=active_period_from,
        active_period_to=active_period_to,
        limit=limit,
        offset=offset,
    )


def get_summary_filter(
    start_date: Optional[str] = Query(default=None, description=MONTH_DESCRIPTION),
    end_date: Optional[str] = Query(default=None, description=MONTH_DESCRIPTION),
    user_id: Optional[str] = Query(default=None, description="Owning user (UUID)"),
    service_name: Optional[str] = Query(default=None, description="Exact service name"),
) -> SummaryFilter:
    """Parse summary query parameters into a SummaryFilter."""
    period_start = _query_month("start_date", start_date)
    period_end = _query_month("end_date", end_date)
    if period_start is None or period_end is None:
        raise InvalidSubscriptionError("start_date and end_date are required")
    if period_end < period_start:
        raise InvalidSubscriptionError("end_date must not be before start_date")

    return SummaryFilter(
        period_start=period_start,
        period_end=period_end,
        user_id=_query_uuid("user_id", user_id),
        service_name=_given(service_name),
    )
