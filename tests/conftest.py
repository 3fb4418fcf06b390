"""Shared pytest fixtures for the WFS validator test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from wfs_ft_validator.core.constants import WFS_20_SCHEMA_LOCATION
from wfs_ft_validator.core.exceptions import TransportError
from wfs_ft_validator.transport.base import Transport
from wfs_ft_validator.utils.kvp import (
    capabilities_url,
    describe_feature_type_url,
    get_feature_url,
)

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"

ENDPOINT = "http://wfs.example.org/wfs"
TN_SCHEMA_URL = "http://wfs.example.org/schemas/tn.xsd"
ROAD_LINK_URL = (
    "http://wfs.example.org/wfs?SERVICE=WFS&REQUEST=GetFeature&TYPENAMES=tn:Road&FEATUREID=road.1"
)
BROKEN_LINK_URL = "http://wfs.example.org/wfs/features/road.9"
EXTERNAL_LINK_URL = "http://registry.example.com/codelist/BridgeType/arch"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


def read_data(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeTransport(Transport):
    """In-memory transport keyed on full request URLs.

    A value that is an exception instance is raised instead of returned.
    Unknown URLs fail like an HTTP 404.
    """

    def __init__(self, responses: dict[str, str | Exception] | None = None) -> None:
        self.responses: dict[str, str | Exception] = dict(responses or {})
        self.requested: list[str] = []
        self.closed = False

    def fetch_text(self, url: str) -> str:
        self.requested.append(url)
        response = self.responses.get(url)
        if response is None:
            raise TransportError(f"HTTP 404 for {url}", url=url, status_code=404)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def transport() -> FakeTransport:
    """An empty fake transport; every request fails with 404."""
    return FakeTransport()


@pytest.fixture()
def service() -> FakeTransport:
    """A fake transport serving a complete two-type WFS at ``ENDPOINT``.

    ``tn:Road`` answers with valid features; ``tn:Bridge`` answers with
    valid features carrying one reachable in-service link, one broken
    in-service link and one external link.
    """
    return FakeTransport(
        {
            capabilities_url(ENDPOINT): read_data("capabilities.xml"),
            describe_feature_type_url(ENDPOINT): read_data("describe_feature_type.xsd"),
            TN_SCHEMA_URL: read_data("tn.xsd"),
            WFS_20_SCHEMA_LOCATION: read_data("wfs.xsd"),
            get_feature_url(ENDPOINT, "tn:Road", 10): read_data("features_road_valid.xml"),
            get_feature_url(ENDPOINT, "tn:Bridge", 10): read_data("features_bridge_links.xml"),
            ROAD_LINK_URL: read_data("features_road_valid.xml"),
        }
    )
