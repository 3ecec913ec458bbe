"""Database engine utilities.

The SQLAlchemy engine owns the connection pool shared by source discovery,
health checks and tile queries.
"""

from sqlalchemy import Engine, create_engine

_DB_DRIVER_SCHEME = "postgresql+psycopg://"
_DB_PLAIN_SCHEMES = ("postgres://", "postgresql://")


def db_normalize_connection_string(connection_string: str) -> str:
    """Map plain PostgreSQL URL schemes onto the psycopg SQLAlchemy driver.

    Args:
        connection_string: User-supplied database DSN.

    Returns:
        str: SQLAlchemy URL. URLs that already name a driver are returned stripped.

    Raises:
        ValueError: Raised when the connection string is blank.
    """

    normalized = connection_string.strip()
    if not normalized:
        raise ValueError("connection_string must not be blank")

    for scheme in _DB_PLAIN_SCHEMES:
        if normalized.startswith(scheme):
            return _DB_DRIVER_SCHEME + normalized[len(scheme):]
    return normalized


def db_create_engine(connection_string: str, pool_size: int = 20) -> Engine:
    """Create the SQLAlchemy engine and its connection pool.

    Args:
        connection_string: Database DSN.
        pool_size: Number of persistent pooled connections.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the DSN is blank or pool_size is below 1.
    """

    if pool_size < 1:
        raise ValueError("pool_size must be at least 1")

    return create_engine(
        db_normalize_connection_string(connection_string),
        pool_size=pool_size,
        max_overflow=0,
        pool_pre_ping=True,
    )
