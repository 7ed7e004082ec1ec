# API endpoints and routers

from .nearest_endpoints import router as nearest_router
from .health_endpoints import router as health_router
from .metrics_endpoints import router as metrics_router

__all__ = [
    "nearest_router",
    "health_router",
    "metrics_router",
]
