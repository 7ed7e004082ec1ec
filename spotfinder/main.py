"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager

from spotfinder.config import get_settings
from spotfinder.core.logging import configure_logging
from spotfinder.core.error_handlers import setup_error_handlers
from spotfinder.middleware import RequestContextMiddleware

# Get application settings
settings = get_settings()

configure_logging(
    settings.log_level.value,
    style=settings.log_format,
    pattern=settings.log_pattern,
    log_file=settings.log_file,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    Opens the shared HTTP client on startup and closes it on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    from spotfinder.core.dependencies import service_container
    await service_container.initialize_services(settings)
    app.state.service_container = service_container
    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await service_container.cleanup_services()
        logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from spotfinder.api import nearest_router, health_router, metrics_router
    app.include_router(nearest_router)
    app.include_router(health_router)
    app.include_router(metrics_router)

    return app


# Create application instance
app = create_app()


@app.get("/")
async def root():
    """Root endpoint for basic health check."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "status": "running"
    }
