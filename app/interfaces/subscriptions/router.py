"""
FastAPI router for the subscriptions bounded context.

All routes delegate to SubscriptionService. No business logic here.
Input validation is handled by Pydantic schemas and query dependencies.
Error mapping is handled by centralized error handlers.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from app.application.subscriptions.service import SubscriptionService
from app.domain.subscriptions.entities import (
    CreateInput,
    ListFilter,
    SummaryFilter,
    UpdateInput,
)
from app.interfaces.subscriptions.dependencies import (
    get_call_timeout,
    get_list_filter,
    get_subscription_service,
    get_summary_filter,
)
from app.interfaces.subscriptions.schemas import (
    ErrorResponse,
    SubscriptionCreateRequest,
    SubscriptionResponse,
    SubscriptionUpdateRequest,
    SummaryResponse,
)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post(
    "",
    response_model=SubscriptionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    summary="Create a subscription",
)
def create_subscription(
    request: SubscriptionCreateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
    timeout: float = Depends(get_call_timeout),
) -> SubscriptionResponse:
    """Create a subscription and return it with its generated id."""
    data = CreateInput(
        service_name=request.service_name,
        price=request.price,
        user_id=request.user_id,
        start_month=request.start_date,
        end_month=request.end_date,
    )
    subscription = service.create(data, timeout=timeout)
    return SubscriptionResponse.from_entity(subscription)


@router.get(
    "",
    response_model=list[SubscriptionResponse],
    response_model_exclude_none=True,
    responses={422: {"model": ErrorResponse}},
    summary="List subscriptions",
    description=(
        "Filter by user, service, start month range (start_date/end_date) "
        "and active window (active_from/active_to). Ordered by start month."
    ),
)
def list_subscriptions(
    filters: ListFilter = Depends(get_list_filter),
    service: SubscriptionService = Depends(get_subscription_service),
    timeout: float = Depends(get_call_timeout),
) -> list[SubscriptionResponse]:
    """List subscriptions matching the query filters."""
    subscriptions = service.list(filters, timeout=timeout)
    return [SubscriptionResponse.from_entity(s) for s in subscriptions]


@router.get(
    "/summary",
    response_model=SummaryResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Total spend over a period",
    description=(
        "Sum price x overlapping months for every subscription matching "
        "user_id/service_name whose active months intersect [start_date, end_date]."
    ),
)
def summarize_subscriptions(
    filters: SummaryFilter = Depends(get_summary_filter),
    service: SubscriptionService = Depends(get_subscription_service),
    timeout: float = Depends(get_call_timeout),
) -> SummaryResponse:
    """Return the total billed amount for the requested period."""
    return SummaryResponse(total=service.sum(filters, timeout=timeout))


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
    summary="Get a subscription",
)
def get_subscription(
    subscription_id: UUID,
    service: SubscriptionService = Depends(get_subscription_service),
    timeout: float = Depends(get_call_timeout),
) -> SubscriptionResponse:
    """Return one subscription by id."""
    return SubscriptionResponse.from_entity(service.get(subscription_id, timeout=timeout))


@router.put(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Replace a subscription",
    description="Replaces service_name, price and months. user_id cannot change.",
)
def update_subscription(
    subscription_id: UUID,
    request: SubscriptionUpdateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
    timeout: float = Depends(get_call_timeout),
) -> SubscriptionResponse:
    """Replace the mutable fields of a subscription."""
    data = UpdateInput(
        service_name=request.service_name,
        price=request.price,
        start_month=request.start_date,
        end_month=request.end_date,
    )
    subscription = service.update(subscription_id, data, timeout=timeout)
    return SubscriptionResponse.from_entity(subscription)


@router.delete(
    "/{subscription_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a subscription",
)
def delete_subscription(
    subscription_id: UUID,
    service: SubscriptionService = Depends(get_subscription_service),
    timeout: float = Depends(get_call_timeout),
) -> Response:
    """Delete one subscription by id."""
    service.delete(subscription_id, timeout=timeout)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
