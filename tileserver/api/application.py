"""FastAPI application factory for the tile server runtime."""

from fastapi import FastAPI

from tileserver.config import AppConfig
from tileserver.db import DatabaseHealthPort

from .routers import api_create_health_router, api_create_sources_router


def create_api_application(config: AppConfig, db_health_service: DatabaseHealthPort) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        config: Finalized runtime configuration.
        db_health_service: Database health service used by health endpoints.

    Returns:
        FastAPI: Framework application with health and source index routes.

    Raises:
        ValueError: Raised when a router dependency is missing.
    """

    application = FastAPI(title="PostGIS Tile Server")
    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(api_create_sources_router(config=config))
    return application
