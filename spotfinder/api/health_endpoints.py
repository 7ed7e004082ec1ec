"""
Health check endpoint.
"""

from fastapi import APIRouter, Request
from datetime import datetime, timezone

from spotfinder.config.settings import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Liveness check reporting whether the pipeline is wired up."""
    settings = get_settings()
    container = getattr(request.app.state, "service_container", None)
    ready = container is not None and container.is_initialized

    return {
        "status": "healthy" if ready else "starting",
        "version": settings.app_version,
        "environment": settings.environment.value,
        "category": settings.category.label,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
