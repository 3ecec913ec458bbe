"""Configuration file loader for the declarative construction path."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import yaml
from pydantic import ValidationError

from .errors import ConfigIoError, ConfigParseError
from .settings import AppConfig, ConfigBuilder, config_available_parallelism, config_resolve_defaults

logger = logging.getLogger(__name__)

_REQUIRED_FIELD_NAME = "connection_string"


def config_read(
    file_path: str | Path,
    available_parallelism: Callable[[], int] = config_available_parallelism,
) -> AppConfig:
    """Read a YAML configuration file and resolve it into the finalized configuration.

    Args:
        file_path: Path of the configuration document.
        available_parallelism: Provider of the default worker process count.

    Returns:
        AppConfig: Fully populated configuration.

    Raises:
        ConfigIoError: Raised when the file is missing or unreadable.
        ConfigParseError: Raised when the document is malformed, lacks
            `connection_string`, or carries a wrongly typed field.
    """

    path = Path(file_path)
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ConfigIoError(f"Cannot read configuration file {path}: {error}") from error

    builder = config_parse_document(contents=contents, source_label=str(path))
    logger.info("Loaded configuration from %s", path)
    return config_resolve_defaults(builder, available_parallelism=available_parallelism)


def config_parse_document(contents: str, source_label: str = "<string>") -> ConfigBuilder:
    """Parse YAML text into a partial configuration.

    Args:
        contents: Full YAML document text.
        source_label: Document origin used in error messages.

    Returns:
        ConfigBuilder: Partial configuration with explicitly supplied values.

    Raises:
        ConfigParseError: Raised when the document cannot be parsed or validated.
    """

    try:
        document = yaml.safe_load(contents)
    except yaml.YAMLError as error:
        raise ConfigParseError(f"Invalid YAML in {source_label}: {error}") from error

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigParseError(
            f"Configuration root in {source_label} must be a mapping, got {type(document).__name__}"
        )

    try:
        return ConfigBuilder.model_validate(document)
    except ValidationError as error:
        missing_field = _config_find_missing_required_field(error)
        if missing_field is not None:
            raise ConfigParseError(
                f"Missing required field `{missing_field}` in {source_label}",
                missing_field=missing_field,
            ) from error
        raise ConfigParseError(f"Invalid configuration in {source_label}: {error}") from error


def _config_find_missing_required_field(error: ValidationError) -> str | None:
    for detail in error.errors():
        location: tuple[Any, ...] = detail.get("loc", ())
        if detail.get("type") == "missing" and location == (_REQUIRED_FIELD_NAME,):
            return _REQUIRED_FIELD_NAME
    return None
