"""Project-native typed exceptions for runtime configuration assembly failures."""

from __future__ import annotations


class ConfigLoadError(RuntimeError):
    """Base exception for configuration load and generation failures.

    Catching this class covers every construction failure. Subclasses identify
    the failing stage while keeping the original cause chained.
    """


class ConfigIoError(ConfigLoadError):
    """Configuration file is missing or cannot be read."""


class ConfigParseError(ConfigLoadError):
    """Configuration document is malformed, incomplete or wrongly typed.

    Attributes:
        missing_field: Name of the required field absent from the document, if any.
    """

    def __init__(self, message: str, missing_field: str | None = None):
        super().__init__(message)
        self.missing_field = missing_field


class ConfigPoolError(ConfigLoadError):
    """Database connection could not be acquired from the pool."""


class ConfigDiscoveryError(ConfigLoadError):
    """Table or function source discovery reported a failure."""
