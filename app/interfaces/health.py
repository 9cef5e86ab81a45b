"""
Health check router.

Liveness endpoint for probes. Reports the application version and the
configured storage backend so a misrouted deployment (for example one
left on ``memory``) is visible at a glance. Does not touch the database.
"""

from fastapi import APIRouter

from app.core.config import settings
from app.interfaces.subscriptions.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application status, version and storage backend.",
)
def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=settings.version,
        storage=settings.storage_backend,
    )
