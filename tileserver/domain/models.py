"""Typed domain models shared across runtime layers.

Source descriptors are produced by database discovery and carried through the
configuration layer without interpretation.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class TableSource:
    """Descriptor of one servable PostGIS table geometry column.

    Attributes:
        id: Public source identifier (`schema.table`).
        schema: Table schema name.
        table: Table name.
        geometry_column: Geometry column rendered into tiles.
        srid: Spatial reference identifier of the geometry column.
        geometry_type: PostGIS geometry type label.
        extent: Tile extent in screen space.
        buffer: Tile buffer size in screen space.
        clip_geom: Whether geometries are clipped to the tile bounds.
        properties: Non-geometry column names mapped to their type names.
    """

    id: str
    schema: str
    table: str
    geometry_column: str
    srid: int
    geometry_type: str | None = None
    extent: int = 4096
    buffer: int = 64
    clip_geom: bool = True
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FunctionSource:
    """Descriptor of one servable tile-producing database function.

    Attributes:
        id: Public source identifier (`schema.function`).
        schema: Function schema name.
        function: Function name.
    """

    id: str
    schema: str
    function: str
