"""Main module entrypoint for local runtime execution.

This module assembles the runtime configuration and launches the HTTP service.
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

import uvicorn

from tileserver.bootstrap import (
    bootstrap_load_config,
    bootstrap_parse_listen_address,
    bootstrap_publish_runtime_config,
)
from tileserver.config import ConfigLoadError

logger = logging.getLogger(__name__)


def _main_positive_int(value: str) -> int:
    parsed_value = int(value)
    if parsed_value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return parsed_value


def _main_non_negative_int(value: str) -> int:
    parsed_value = int(value)
    if parsed_value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return parsed_value


def main_parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list, defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: Parsed arguments; unset overrides are None.

    Raises:
        SystemExit: Raised by argparse on invalid input.
    """

    argument_parser = argparse.ArgumentParser(description="PostGIS vector tile server")
    argument_parser.add_argument(
        "connection_string",
        nargs="?",
        default=None,
        help="Database connection string; falls back to DATABASE_URL",
    )
    argument_parser.add_argument("-c", "--config", dest="config_path", help="Path to YAML configuration file")
    argument_parser.add_argument(
        "--keep-alive",
        dest="keep_alive",
        type=_main_non_negative_int,
        help="Connection keep alive timeout in seconds [default: 75]",
    )
    argument_parser.add_argument(
        "--listen-addresses",
        dest="listen_addresses",
        help="The socket address to bind [default: 0.0.0.0:3000]",
    )
    argument_parser.add_argument(
        "--pool-size",
        dest="pool_size",
        type=_main_positive_int,
        help="Maximum connections pool size [default: 20]",
    )
    argument_parser.add_argument(
        "-W",
        "--workers",
        dest="workers",
        type=_main_positive_int,
        help="Number of web server workers [default: number of CPUs]",
    )
    argument_parser.add_argument(
        "--watch",
        action="store_true",
        default=None,
        help="Scan for new sources on sources list requests",
    )
    argument_parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level [default: INFO]",
    )
    return argument_parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Assemble runtime configuration and serve the application.

    Args:
        argv: Argument list, defaults to `sys.argv[1:]`.

    Raises:
        SystemExit: Raised with status 1 when configuration assembly fails.
    """

    arguments = main_parse_arguments(argv)
    logging.basicConfig(level=arguments.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = bootstrap_load_config(arguments)
        host, port = bootstrap_parse_listen_address(config.listen_addresses)
    except (ConfigLoadError, ValueError) as error:
        logger.error("Startup failed: %s", error)
        raise SystemExit(1) from error

    logger.info(
        "Serving on %s:%d with %d workers and pool size %d",
        host,
        port,
        config.worker_processes,
        config.pool_size,
    )
    runtime_config_path = bootstrap_publish_runtime_config(config)
    try:
        uvicorn.run(
            "tileserver.bootstrap:bootstrap_create_worker_application",
            factory=True,
            host=host,
            port=port,
            workers=config.worker_processes,
            timeout_keep_alive=config.keep_alive,
            log_level=arguments.log_level.lower(),
        )
    finally:
        runtime_config_path.unlink(missing_ok=True)


if __name__ == "__main__":
    main()
