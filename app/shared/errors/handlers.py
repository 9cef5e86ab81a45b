"""
Centralized error handlers for FastAPI.

Maps subscription domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.subscriptions.errors import (
    InvalidSubscriptionError,
    PersistenceError,
    SubscriptionDomainError,
    SubscriptionNotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(SubscriptionNotFoundError)
    async def handle_subscription_not_found(
        _request: Request, exc: SubscriptionNotFoundError
    ) -> JSONResponse:
        logger.warning("Subscription not found: %s", exc.subscription_id)
        return _error_response(HTTP_404, "Subscription not found")

    @app.exception_handler(InvalidSubscriptionError)
    async def handle_invalid_subscription(
        _request: Request, exc: InvalidSubscriptionError
    ) -> JSONResponse:
        logger.warning("Invalid subscription input: %s", exc.reason)
        return _error_response(HTTP_422, "Invalid subscription", exc.reason)

    @app.exception_handler(PersistenceError)
    async def handle_persistence(
        _request: Request, exc: PersistenceError
    ) -> JSONResponse:
        """Storage failures are internal; only the operation name is logged."""
        logger.error("Persistence failure in %s", exc.operation)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(SubscriptionDomainError)
    async def handle_subscription_domain(
        _request: Request, exc: SubscriptionDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled subscription domain errors."""
        logger.error("Unhandled subscription domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
