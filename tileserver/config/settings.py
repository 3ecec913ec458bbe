"""Typed runtime configuration models and default resolution.

`ConfigBuilder` holds only what a construction path explicitly supplied.
`config_resolve_defaults` turns it into the immutable `AppConfig` consumed by the
rest of the service.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .errors import ConfigLoadError

DEFAULT_WATCH = False
DEFAULT_POOL_SIZE = 20
DEFAULT_KEEP_ALIVE_SECONDS = 75
DEFAULT_LISTEN_ADDRESSES = "0.0.0.0:3000"

SourceCollection = dict[str, Any]


def config_available_parallelism() -> int:
    """Return the number of processing units available to this process.

    Returns:
        int: CPU count honoring process affinity where supported, never below 1.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if hasattr(os, "sched_getaffinity"):
        return max(len(os.sched_getaffinity(0)), 1)
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ConfigOverrides:
    """Command-line override values for the introspection construction path.

    Every attribute is optional. Absent values are defaulted by
    `config_resolve_defaults`, never here.

    Attributes:
        watch: Enable live reload of data sources.
        keep_alive: HTTP keep-alive seconds.
        listen_addresses: Network bind address (`host:port`).
        pool_size: Database connection pool capacity.
        worker_processes: Number of service worker processes.
    """

    watch: bool | None = None
    keep_alive: int | None = None
    listen_addresses: str | None = None
    pool_size: int | None = None
    worker_processes: int | None = None


class ConfigBuilder(BaseModel):
    """Partial configuration holding only explicitly supplied values.

    Attributes:
        watch: Optional live reload flag.
        pool_size: Optional connection pool capacity.
        keep_alive: Optional HTTP keep-alive seconds.
        worker_processes: Optional worker process count.
        listen_addresses: Optional bind address.
        connection_string: Required database DSN.
        table_sources: Optional table source descriptors keyed by source id.
        function_sources: Optional function source descriptors keyed by source id.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    watch: bool | None = None
    pool_size: int | None = Field(default=None, ge=1)
    keep_alive: int | None = Field(default=None, ge=0)
    worker_processes: int | None = Field(default=None, ge=1)
    listen_addresses: str | None = None
    connection_string: str
    table_sources: SourceCollection | None = None
    function_sources: SourceCollection | None = None


class AppConfig(BaseModel):
    """Finalized runtime configuration with every default applied.

    Attributes:
        watch: Live reload flag.
        pool_size: Connection pool capacity.
        keep_alive: HTTP keep-alive seconds.
        worker_processes: Worker process count.
        listen_addresses: Bind address (`host:port`).
        connection_string: Database DSN exactly as supplied.
        table_sources: Table source descriptors, absent when never supplied.
        function_sources: Function source descriptors, absent when never supplied.
    """

    model_config = ConfigDict(frozen=True)

    watch: bool
    pool_size: int
    keep_alive: int
    worker_processes: int
    listen_addresses: str
    connection_string: str
    table_sources: SourceCollection | None = None
    function_sources: SourceCollection | None = None


def config_resolve_defaults(
    builder: ConfigBuilder,
    available_parallelism: Callable[[], int] = config_available_parallelism,
) -> AppConfig:
    """Resolve a partial configuration into the finalized configuration.

    Args:
        builder: Partial configuration with explicitly supplied values.
        available_parallelism: Provider of the default worker process count.

    Returns:
        AppConfig: Fully populated configuration.

    Raises:
        RuntimeError: This resolver does not raise runtime errors.
    """

    worker_processes = builder.worker_processes
    if worker_processes is None:
        worker_processes = available_parallelism()

    return AppConfig(
        watch=DEFAULT_WATCH if builder.watch is None else builder.watch,
        pool_size=DEFAULT_POOL_SIZE if builder.pool_size is None else builder.pool_size,
        keep_alive=DEFAULT_KEEP_ALIVE_SECONDS if builder.keep_alive is None else builder.keep_alive,
        worker_processes=worker_processes,
        listen_addresses=DEFAULT_LISTEN_ADDRESSES if builder.listen_addresses is None else builder.listen_addresses,
        connection_string=builder.connection_string,
        table_sources=builder.table_sources,
        function_sources=builder.function_sources,
    )


def config_render_effective(config: AppConfig) -> dict[str, Any]:
    """Render effective settings as a JSON-ready payload for diagnostics.

    Args:
        config: Finalized configuration.

    Returns:
        dict[str, Any]: Serialized configuration with the DSN password masked.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload = config.model_dump(mode="json")
    payload["connection_string"] = _config_mask_connection_string(config.connection_string)
    return payload


def _config_mask_connection_string(connection_string: str) -> str:
    try:
        return make_url(connection_string).render_as_string(hide_password=True)
    except (ArgumentError, ValueError):
        return "<unparseable connection string>"


class EnvironmentSettings(BaseSettings):
    """Environment fallback for the database connection string.

    Attributes:
        database_url: DSN read from `DATABASE_URL` or `.env`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    database_url: str | None = Field(default=None)


def config_load_environment_database_url() -> str | None:
    """Load the database connection string from environment and dotenv.

    Returns:
        str | None: Non-blank DSN, or None when the variable is unset or blank.

    Raises:
        ConfigLoadError: Raised when environment settings cannot be validated.
    """

    try:
        environment_settings = EnvironmentSettings()
    except ValidationError as error:
        raise ConfigLoadError(f"Environment configuration validation failed. Details: {error}") from error

    if environment_settings.database_url is None:
        return None
    database_url = environment_settings.database_url.strip()
    return database_url or None
