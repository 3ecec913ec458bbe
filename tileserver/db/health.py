"""Database health service verifying pooled connectivity and PostGIS availability."""

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from tileserver.domain import HealthStatus

from .interfaces import DatabaseHealthPort


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Database health service backed by the tile server connection pool."""

    def __init__(self, engine: Engine):
        """Initialize database health service.

        Args:
            engine: SQLAlchemy engine whose pool serves tile queries.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL with the password hidden.

        Returns:
            str: Rendered engine URL string.
        """

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Check that a pooled connection can reach PostGIS.

        Returns:
            HealthStatus: Health payload carrying the PostGIS library version.

        Raises:
            ConnectionError: Raised when the pool or the query fails.
        """

        try:
            with self._engine.connect() as connection:
                postgis_version = connection.execute(text("SELECT postgis_lib_version()")).scalar_one()
        except SQLAlchemyError as error:
            raise ConnectionError("database connectivity check failed") from error
        return HealthStatus(status="ok", detail=f"PostGIS {postgis_version}")
