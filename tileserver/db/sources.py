"""PostGIS schema discovery for servable table and function sources."""

from __future__ import annotations

from collections import Counter

from sqlalchemy import Connection, text
from sqlalchemy.exc import SQLAlchemyError

from tileserver.domain import FunctionSource, TableSource

from .interfaces import SourceDiscoveryError

_DB_TABLE_SOURCES_QUERY = text(
    "SELECT "
    "gc.f_table_schema AS schema_name, "
    "gc.f_table_name AS table_name, "
    "gc.f_geometry_column AS geometry_column, "
    "gc.srid AS srid, "
    "gc.type AS geometry_type, "
    "COALESCE("
    "jsonb_object_agg(c.column_name, c.udt_name) FILTER (WHERE c.column_name IS NOT NULL), "
    "'{}'::jsonb"
    ") AS properties "
    "FROM geometry_columns AS gc "
    "LEFT JOIN information_schema.columns AS c "
    "ON c.table_schema = gc.f_table_schema "
    "AND c.table_name = gc.f_table_name "
    "AND c.column_name <> gc.f_geometry_column "
    "AND c.udt_name NOT IN ('geometry', 'geography') "
    "GROUP BY gc.f_table_schema, gc.f_table_name, gc.f_geometry_column, gc.srid, gc.type "
    "ORDER BY gc.f_table_schema, gc.f_table_name, gc.f_geometry_column"
)

_DB_FUNCTION_SOURCES_QUERY = text(
    "SELECT "
    "n.nspname AS schema_name, "
    "p.proname AS function_name "
    "FROM pg_catalog.pg_proc AS p "
    "JOIN pg_catalog.pg_namespace AS n ON n.oid = p.pronamespace "
    "WHERE p.prorettype = 'bytea'::regtype "
    "AND p.proargnames = ARRAY['z', 'x', 'y', 'query_params'] "
    "ORDER BY n.nspname, p.proname"
)


def db_discover_table_sources(connection: Connection) -> dict[str, TableSource]:
    """Discover every table geometry column registered in `geometry_columns`.

    Sources are keyed `schema.table`. When a table has more than one geometry
    column, each of its sources is keyed `schema.table.geometry_column`.

    Args:
        connection: Open database connection.

    Returns:
        dict[str, TableSource]: Descriptors keyed by source id, possibly empty.

    Raises:
        SourceDiscoveryError: Raised when the discovery query fails.
    """

    try:
        rows = connection.execute(_DB_TABLE_SOURCES_QUERY).mappings().all()
    except SQLAlchemyError as error:
        raise SourceDiscoveryError(f"table source discovery failed: {error}") from error

    geometry_column_counts = Counter((row["schema_name"], row["table_name"]) for row in rows)

    table_sources: dict[str, TableSource] = {}
    for row in rows:
        source_id = f"{row['schema_name']}.{row['table_name']}"
        # every geometry column of a multi-geometry table is suffixed
        if geometry_column_counts[(row["schema_name"], row["table_name"])] > 1:
            source_id = f"{source_id}.{row['geometry_column']}"
        table_sources[source_id] = TableSource(
            id=source_id,
            schema=row["schema_name"],
            table=row["table_name"],
            geometry_column=row["geometry_column"],
            srid=int(row["srid"]),
            geometry_type=row["geometry_type"],
            properties=dict(row["properties"] or {}),
        )
    return table_sources


def db_discover_function_sources(connection: Connection) -> dict[str, FunctionSource]:
    """Discover functions shaped `(z, x, y, query_params) -> bytea`.

    Args:
        connection: Open database connection.

    Returns:
        dict[str, FunctionSource]: Descriptors keyed by source id, possibly empty.

    Raises:
        SourceDiscoveryError: Raised when the discovery query fails.
    """

    try:
        rows = connection.execute(_DB_FUNCTION_SOURCES_QUERY).mappings().all()
    except SQLAlchemyError as error:
        raise SourceDiscoveryError(f"function source discovery failed: {error}") from error

    function_sources: dict[str, FunctionSource] = {}
    for row in rows:
        source_id = f"{row['schema_name']}.{row['function_name']}"
        function_sources[source_id] = FunctionSource(
            id=source_id,
            schema=row["schema_name"],
            function=row["function_name"],
        )
    return function_sources
