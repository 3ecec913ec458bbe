"""Application bootstrap wiring for configuration assembly and dependency setup."""

from __future__ import annotations

import argparse
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable

from fastapi import FastAPI
from pydantic import ValidationError
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from tileserver.api import create_api_application
from tileserver.config import (
    AppConfig,
    ConfigIoError,
    ConfigLoadError,
    ConfigOverrides,
    ConfigParseError,
    ConfigPoolError,
    config_generate,
    config_load_environment_database_url,
    config_read,
)
from tileserver.config.settings import DEFAULT_POOL_SIZE
from tileserver.db import SQLAlchemyDatabaseHealthService, db_create_engine

logger = logging.getLogger(__name__)

RUNTIME_CONFIG_ENV = "TILESERVER_RUNTIME_CONFIG_FILE"


def bootstrap_build_overrides(arguments: argparse.Namespace) -> ConfigOverrides:
    """Collect command-line override values.

    Args:
        arguments: Parsed command-line arguments.

    Returns:
        ConfigOverrides: Override values, None where the flag was not given.
    """

    return ConfigOverrides(
        watch=arguments.watch,
        keep_alive=arguments.keep_alive,
        listen_addresses=arguments.listen_addresses,
        pool_size=arguments.pool_size,
        worker_processes=arguments.workers,
    )


def bootstrap_load_config(
    arguments: argparse.Namespace,
    engine_factory: Callable[..., Engine] = db_create_engine,
) -> AppConfig:
    """Run exactly one configuration construction path for this startup.

    The configuration file wins when `--config` is given. Otherwise the
    database is introspected using the command-line connection string or
    `DATABASE_URL`.

    Args:
        arguments: Parsed command-line arguments.
        engine_factory: Factory creating the pool used for introspection.

    Returns:
        AppConfig: Finalized runtime configuration.

    Raises:
        ConfigLoadError: Raised when no connection string is available or when
            the selected construction path fails.
    """

    if arguments.config_path:
        logger.info("Reading configuration file %s", arguments.config_path)
        return config_read(arguments.config_path)

    connection_string = arguments.connection_string or config_load_environment_database_url()
    if not connection_string:
        raise ConfigLoadError("Database connection string is not set. Pass it as an argument or set DATABASE_URL.")

    overrides = bootstrap_build_overrides(arguments)
    pool_size = overrides.pool_size if overrides.pool_size is not None else DEFAULT_POOL_SIZE
    try:
        engine = engine_factory(connection_string, pool_size=pool_size)
    except (SQLAlchemyError, ValueError) as error:
        raise ConfigPoolError(f"Cannot create connection pool: {error}") from error

    logger.info("Introspecting database for table and function sources")
    try:
        return config_generate(overrides=overrides, connection_string=connection_string, engine=engine)
    finally:
        engine.dispose()


def bootstrap_create_application(config: AppConfig) -> FastAPI:
    """Assemble the runtime application for one finalized configuration.

    Args:
        config: Finalized runtime configuration.

    Returns:
        FastAPI: Fully initialized application instance.

    Raises:
        ValueError: Raised when the configured DSN or pool size is invalid.
    """

    engine = db_create_engine(config.connection_string, pool_size=config.pool_size)
    return create_api_application(config=config, db_health_service=SQLAlchemyDatabaseHealthService(engine=engine))


def bootstrap_publish_runtime_config(config: AppConfig) -> Path:
    """Publish the finalized configuration for server worker processes.

    The JSON payload holds the unmasked DSN. It is written to a temporary file
    readable only by the current user, and only the file path is exported in
    `TILESERVER_RUNTIME_CONFIG_FILE`.

    Args:
        config: Finalized runtime configuration.

    Returns:
        Path: Published file path; the caller removes it on shutdown.

    Raises:
        OSError: Raised when the temporary file cannot be written.
    """

    file_descriptor, file_name = tempfile.mkstemp(prefix="tileserver-", suffix=".json")
    with os.fdopen(file_descriptor, "w", encoding="utf-8") as config_file:
        config_file.write(config.model_dump_json())
    os.environ[RUNTIME_CONFIG_ENV] = file_name
    return Path(file_name)


def bootstrap_create_worker_application() -> FastAPI:
    """Build the application inside a server worker process.

    Reads the configuration published by `bootstrap_publish_runtime_config`.

    Returns:
        FastAPI: Fully initialized application instance.

    Raises:
        ConfigLoadError: Raised when the published configuration is missing or invalid.
    """

    config_file_name = os.environ.get(RUNTIME_CONFIG_ENV)
    if not config_file_name:
        raise ConfigLoadError(f"{RUNTIME_CONFIG_ENV} is not set")
    try:
        serialized_config = Path(config_file_name).read_text(encoding="utf-8")
    except OSError as error:
        raise ConfigIoError(f"Cannot read published configuration {config_file_name}: {error}") from error
    try:
        config = AppConfig.model_validate_json(serialized_config)
    except ValidationError as error:
        raise ConfigParseError(f"Invalid published configuration {config_file_name}: {error}") from error
    return bootstrap_create_application(config)


def bootstrap_parse_listen_address(listen_addresses: str) -> tuple[str, int]:
    """Split a `host:port` bind address.

    Args:
        listen_addresses: Bind address, IPv6 hosts optionally bracketed.

    Returns:
        tuple[str, int]: Host and port.

    Raises:
        ValueError: Raised when the address has no valid port.
    """

    host, separator, port_text = listen_addresses.strip().rpartition(":")
    if not separator or not host or not port_text.isdigit():
        raise ValueError(f"listen address must look like host:port, got {listen_addresses!r}")

    port = int(port_text)
    if not 1 <= port <= 65535:
        raise ValueError(f"listen port out of range: {port}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, port
