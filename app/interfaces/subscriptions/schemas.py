"""
Pydantic schemas for subscription API request/response validation.

These schemas enforce input validation and define the API contract.
Months travel over the wire as ``MM-YYYY`` strings and are parsed here
into ``date`` values pinned to the first day of the month.
No business logic belongs here.
"""

import re
from datetime import date, datetime
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer, model_validator

from app.domain.subscriptions.entities import Subscription

MONTH_LAYOUT = "%m-%Y"
MONTH_PATTERN = r"^(0[1-9]|1[0-2])-\d{4}$"
MONTH_DESCRIPTION = "Calendar month in MM-YYYY format"
SERVICE_NAME_MAX_LEN = 255

_MONTH_RE = re.compile(MONTH_PATTERN)


def parse_month(value: str) -> date:
    """Parse an ``MM-YYYY`` string into the first day of that month.

    The month must have two digits; ``7-2025`` and ISO dates are rejected.

    Raises:
        ValueError: If the string does not match the layout.
    """
    if not _MONTH_RE.fullmatch(value):
        raise ValueError("invalid month format, expected MM-YYYY")
    return datetime.strptime(value, MONTH_LAYOUT).date()


def format_month(value: date) -> str:
    """Format a month value as ``MM-YYYY``."""
    return value.strftime(MONTH_LAYOUT)


def _month_input(value: Any) -> date:
    # Already-parsed dates come from entities when building responses.
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("month must be a string in MM-YYYY format")
    return parse_month(value)


def _optional_month_input(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    return _month_input(value)


Month = Annotated[
    date,
    BeforeValidator(_month_input),
    PlainSerializer(format_month, return_type=str),
]
OptionalMonth = Annotated[
    Optional[date],
    BeforeValidator(_optional_month_input),
    PlainSerializer(format_month, return_type=str, when_used="unless-none"),
]


class SubscriptionUpdateRequest(BaseModel):
    """Request schema for replacing a subscription.

    Attributes:
        service_name: Name of the subscribed service.
        price: Monthly price in the smallest currency unit.
        start_date: First billed month.
        end_date: Last billed month, omitted, null or "" if ongoing.
    """

    service_name: str = Field(
        ..., min_length=1, max_length=SERVICE_NAME_MAX_LEN, description="Service name"
    )
    price: int = Field(..., ge=0, description="Monthly price in minor currency units")
    start_date: Month = Field(..., description=MONTH_DESCRIPTION)
    end_date: OptionalMonth = Field(default=None, description=MONTH_DESCRIPTION)

    @model_validator(mode="after")
    def _check_range(self) -> "SubscriptionUpdateRequest":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SubscriptionCreateRequest(SubscriptionUpdateRequest):
    """Request schema for creating a subscription."""

    user_id: UUID = Field(..., description="Owning user")


class SubscriptionResponse(BaseModel):
    """A subscription as returned by the API."""

    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: Month
    end_date: OptionalMonth = None

    @classmethod
    def from_entity(cls, subscription: Subscription) -> "SubscriptionResponse":
        return cls(
            id=subscription.id,
            service_name=subscription.service_name,
            price=subscription.price,
            user_id=subscription.user_id,
            start_date=subscription.start_month,
            end_date=subscription.end_month,
        )


class SummaryResponse(BaseModel):
    """Total billed amount for the requested window."""

    total: int


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str
    version: str
    storage: str
