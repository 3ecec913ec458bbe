"""Configuration package for runtime settings assembly."""

from .errors import ConfigDiscoveryError, ConfigIoError, ConfigLoadError, ConfigParseError, ConfigPoolError
from .generator import config_generate
from .loader import config_parse_document, config_read
from .settings import (
    AppConfig,
    ConfigBuilder,
    ConfigOverrides,
    config_available_parallelism,
    config_load_environment_database_url,
    config_render_effective,
    config_resolve_defaults,
)

__all__ = [
    "AppConfig",
    "ConfigBuilder",
    "ConfigDiscoveryError",
    "ConfigIoError",
    "ConfigLoadError",
    "ConfigOverrides",
    "ConfigParseError",
    "ConfigPoolError",
    "config_available_parallelism",
    "config_generate",
    "config_load_environment_database_url",
    "config_parse_document",
    "config_read",
    "config_render_effective",
    "config_resolve_defaults",
]
