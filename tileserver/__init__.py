"""PostGIS vector tile server runtime package."""
