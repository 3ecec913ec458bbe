"""Configuration generator for the database introspection construction path."""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import ValidationError
from sqlalchemy import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from tileserver.db import SourceDiscoveryError, db_discover_function_sources, db_discover_table_sources

from .errors import ConfigDiscoveryError, ConfigParseError, ConfigPoolError
from .settings import AppConfig, ConfigBuilder, ConfigOverrides, config_available_parallelism, config_resolve_defaults

logger = logging.getLogger(__name__)

SourceDiscovery = Callable[[Connection], dict[str, Any]]


def config_generate(
    overrides: ConfigOverrides,
    connection_string: str,
    engine: Engine,
    table_source_discovery: SourceDiscovery = db_discover_table_sources,
    function_source_discovery: SourceDiscovery = db_discover_function_sources,
    available_parallelism: Callable[[], int] = config_available_parallelism,
) -> AppConfig:
    """Build the finalized configuration from live database introspection.

    One pooled connection is acquired for both discovery queries and returned
    to the pool on every exit path.

    Args:
        overrides: Command-line override values, each optional.
        connection_string: Database DSN in effect for this process.
        engine: SQLAlchemy engine owning the connection pool.
        table_source_discovery: Collaborator returning table source descriptors.
        function_source_discovery: Collaborator returning function source descriptors.
        available_parallelism: Provider of the default worker process count.

    Returns:
        AppConfig: Fully populated configuration with both source collections present.

    Raises:
        ConfigParseError: Raised when an override value is out of range or wrongly typed.
        ConfigPoolError: Raised when no connection can be acquired.
        ConfigDiscoveryError: Raised when either discovery collaborator fails.
    """

    try:
        builder = ConfigBuilder(
            watch=overrides.watch,
            keep_alive=overrides.keep_alive,
            listen_addresses=overrides.listen_addresses,
            pool_size=overrides.pool_size,
            worker_processes=overrides.worker_processes,
            connection_string=connection_string,
        )
    except ValidationError as error:
        raise ConfigParseError(f"Invalid command-line overrides: {error}") from error

    try:
        connection = engine.connect()
    except SQLAlchemyError as error:
        raise ConfigPoolError(f"Cannot acquire database connection: {error}") from error

    with connection:
        try:
            table_sources = table_source_discovery(connection)
            function_sources = function_source_discovery(connection)
        except SourceDiscoveryError as error:
            raise ConfigDiscoveryError(f"Source discovery failed: {error}") from error

    logger.info(
        "Discovered %d table sources and %d function sources",
        len(table_sources),
        len(function_sources),
    )

    builder = builder.model_copy(update={"table_sources": table_sources, "function_sources": function_sources})
    return config_resolve_defaults(builder, available_parallelism=available_parallelism)
