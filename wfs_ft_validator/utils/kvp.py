"""WFS key-value-pair request URLs.

Query parameters are merged onto the endpoint's own query string, so
endpoints such as ``https://host/ows?map=inspire`` keep their parameters.
"""

from __future__ import annotations

import httpx

from wfs_ft_validator.core.constants import (
    CAPABILITIES_PARAMS,
    DESCRIBE_FEATURE_TYPE_PARAMS,
    WFS_VERSION,
)


def build_request_url(endpoint: str, params: dict[str, str]) -> str:
    """Return *endpoint* with *params* merged into its query string."""
    return str(httpx.URL(endpoint).copy_merge_params(params))


def capabilities_url(endpoint: str) -> str:
    return build_request_url(endpoint, CAPABILITIES_PARAMS)


def describe_feature_type_url(endpoint: str) -> str:
    """URL of the combined schema for all feature types (no ``TYPENAME``)."""
    return build_request_url(endpoint, DESCRIBE_FEATURE_TYPE_PARAMS)


def get_feature_url(endpoint: str, type_name: str, count: int) -> str:
    return build_request_url(
        endpoint,
        {
            "SERVICE": "WFS",
            "VERSION": WFS_VERSION,
            "REQUEST": "GetFeature",
            "TYPENAMES": type_name,
            "COUNT": str(count),
        },
    )
