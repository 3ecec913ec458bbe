"""Database layer package for all SQL and connection pool boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import DatabaseHealthPort, SourceDiscoveryError
from .session import db_create_engine, db_normalize_connection_string
from .sources import db_discover_function_sources, db_discover_table_sources

__all__ = [
	"DatabaseHealthPort",
	"SQLAlchemyDatabaseHealthService",
	"SourceDiscoveryError",
	"db_create_engine",
	"db_discover_function_sources",
	"db_discover_table_sources",
	"db_normalize_connection_string",
]
