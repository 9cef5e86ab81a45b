"""
Domain-specific errors for the subscriptions bounded context.

All errors raised from the domain and application layers are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from uuid import UUID


class SubscriptionDomainError(Exception):
    """Base error for all subscriptions domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class SubscriptionNotFoundError(SubscriptionDomainError):
    """Raised when an operation targets a subscription id absent from the store."""

    def __init__(self, subscription_id: UUID) -> None:
        super().__init__(f"Subscription not found: {subscription_id}")
        self.subscription_id = subscription_id


class InvalidSubscriptionError(SubscriptionDomainError):
    """Raised when input reaching the core violates a subscription invariant."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid subscription: {reason}")
        self.reason = reason


class PersistenceError(SubscriptionDomainError):
    """Raised when the repository fails for any reason other than a missing row.

    Attributes:
        operation: Name of the failed operation, e.g. ``subscriptions.create``.
        reason: Short description of the underlying failure.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"{operation}: {reason}")
        self.operation = operation
        self.reason = reason
