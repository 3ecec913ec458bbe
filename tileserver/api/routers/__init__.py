"""Router factories for the diagnostics HTTP surface."""

from .health import api_create_health_router
from .sources import api_create_sources_router

__all__ = ["api_create_health_router", "api_create_sources_router"]
