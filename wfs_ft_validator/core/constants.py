"""Shared validator constants: single source of truth.

Centralises WFS namespaces, schema locations, request parameters and
process exit codes used by the activities, the orchestrator and the CLI.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Namespaces and schema locations
# ---------------------------------------------------------------------------

WFS_20_NAMESPACE: str = "http://www.opengis.net/wfs/2.0"
"""Namespace of the WFS 2.0 response envelope (``wfs:FeatureCollection``)."""

WFS_20_SCHEMA_LOCATION: str = "http://schemas.opengis.net/wfs/2.0/wfs.xsd"
"""Canonical OGC location of the WFS 2.0 schema."""

# ---------------------------------------------------------------------------
# Request parameters
# ---------------------------------------------------------------------------

WFS_VERSION: str = "2.0.0"

GML_321_OUTPUT_FORMAT: str = "text/xml; subtype=gml/3.2.1"

CAPABILITIES_PARAMS: dict[str, str] = {
    "service": "WFS",
    "request": "GetCapabilities",
}

DESCRIBE_FEATURE_TYPE_PARAMS: dict[str, str] = {
    "SERVICE": "WFS",
    "VERSION": WFS_VERSION,
    "REQUEST": "DescribeFeatureType",
    "OUTPUTFORMAT": GML_321_OUTPUT_FORMAT,
}

DEFAULT_FEATURE_COUNT: int = 10
"""Number of features requested per feature type."""

# ---------------------------------------------------------------------------
# Process exit codes
# ---------------------------------------------------------------------------

EXIT_OK: int = 0
EXIT_USAGE: int = 1
EXIT_ERRORS: int = 2
