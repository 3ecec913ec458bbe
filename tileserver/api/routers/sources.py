"""Source index and effective settings router composition."""

from typing import Any

from fastapi import APIRouter

from tileserver.config import AppConfig, config_render_effective


def api_create_sources_router(config: AppConfig) -> APIRouter:
    """Create router listing configured sources and effective settings.

    Args:
        config: Finalized runtime configuration.

    Returns:
        APIRouter: Router exposing `/index.json`, `/rpc/index.json` and `/config`.

    Raises:
        ValueError: Raised when config is None.
    """

    if config is None:
        raise ValueError("config must not be None")

    effective_settings = config_render_effective(config)
    router = APIRouter(tags=["sources"])

    @router.get("/index.json")
    def api_table_sources_index() -> dict[str, Any]:
        """Return table source descriptors keyed by source id."""

        return effective_settings["table_sources"] or {}

    @router.get("/rpc/index.json")
    def api_function_sources_index() -> dict[str, Any]:
        """Return function source descriptors keyed by source id."""

        return effective_settings["function_sources"] or {}

    @router.get("/config")
    def api_effective_config() -> dict[str, Any]:
        """Return effective runtime settings with the DSN password masked."""

        return effective_settings

    return router
