"""
Dependency injection setup for FastAPI.
Provides the nearest-spot pipeline with a shared HTTP connection pool.
"""

from fastapi import Depends, Request, HTTPException
from typing import Optional
import logging
import asyncio

import httpx

from spotfinder.config.settings import Settings, get_settings
from spotfinder.services.pipeline import NearestSpotPipeline


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for application services with lifecycle management.

    Holds the pooled httpx client used by both location services. The
    pipeline itself keeps no per-request state, so one instance serves
    concurrent requests.
    """

    def __init__(self):
        self._http_client: Optional[httpx.AsyncClient] = None
        self._pipeline: Optional[NearestSpotPipeline] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    async def initialize_services(self, settings: Optional[Settings] = None) -> None:
        """Create the HTTP client and pipeline."""
        async with self._initialization_lock:
            if self._initialized:
                return

            settings = settings or get_settings()
            logger.info("Initializing service container")

            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(float(settings.search.timeout_seconds)),
                follow_redirects=True,
            )
            self._pipeline = NearestSpotPipeline.from_settings(
                settings, http_client=self._http_client
            )
            self._initialized = True
            logger.info(
                f"Service container ready (category={settings.category.label}, "
                f"radius={settings.search.radius_m:g}m)"
            )

    async def cleanup_services(self) -> None:
        """Close the HTTP client and drop services."""
        logger.info("Cleaning up service container")
        try:
            if self._http_client is not None:
                await self._http_client.aclose()
        finally:
            self._http_client = None
            self._pipeline = None
            self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def get_pipeline(self) -> NearestSpotPipeline:
        """Get pipeline instance."""
        if not self._initialized or self._pipeline is None:
            raise RuntimeError("Service container not initialized")
        return self._pipeline


# Global service container
service_container = ServiceContainer()


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.

    Raises:
        HTTPException: If service container is not available
    """
    if not hasattr(request.app.state, 'service_container'):
        logger.error("Service container not initialized")
        raise HTTPException(
            status_code=503,
            detail="Service container not available"
        )

    return request.app.state.service_container


def get_pipeline(
    container: ServiceContainer = Depends(get_service_container)
) -> NearestSpotPipeline:
    """Dependency provider for NearestSpotPipeline."""
    try:
        return container.get_pipeline()
    except RuntimeError as e:
        logger.error(f"Pipeline not available: {e}")
        raise HTTPException(
            status_code=503,
            detail="Pipeline not available"
        )


def get_request_id(request: Request) -> str:
    """Get request ID from request state."""
    return getattr(request.state, 'request_id', 'unknown')
