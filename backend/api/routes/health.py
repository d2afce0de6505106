"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter

from api.dependencies import BackendDep
from infrastructure.config import get_settings
from services.delivery_queue import delivery_queue

router = APIRouter()
settings = get_settings()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/session")
async def health_session(client: BackendDep):
    """Backend session state and background webhook deliveries."""
    return {
        "authenticated": client.is_authenticated,
        "webhook_deliveries": delivery_queue.stats(),
    }
