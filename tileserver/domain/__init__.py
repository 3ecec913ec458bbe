"""Domain models used across application layer boundaries."""

from .models import FunctionSource, HealthStatus, TableSource

__all__ = ["FunctionSource", "HealthStatus", "TableSource"]
