"""Tests for the combined schema builder.

Covers:
- WFS import injection (placement, prefixes, escaping)
- Compilation with imports fetched through the transport
- Failures: request, no closing tag, not well-formed, not compilable
"""

from __future__ import annotations

import pytest
from lxml import etree

from tests.conftest import ENDPOINT, TN_SCHEMA_URL, FakeTransport, read_data
from wfs_ft_validator.activities.build_schema import (
    build_combined_schema,
    compile_schema,
    inject_wfs_import,
)
from wfs_ft_validator.core.constants import WFS_20_NAMESPACE, WFS_20_SCHEMA_LOCATION
from wfs_ft_validator.core.exceptions import SchemaBuildFailure, TransportError
from wfs_ft_validator.utils.kvp import describe_feature_type_url

_IMPORT = (
    f'<import namespace="{WFS_20_NAMESPACE}" schemaLocation="{WFS_20_SCHEMA_LOCATION}"/>'
)


class TestInjectWfsImport:
    def test_inserted_before_closing_tag(self) -> None:
        text = '<schema xmlns="http://www.w3.org/2001/XMLSchema"></schema>'
        patched = inject_wfs_import(text)
        assert patched.endswith(_IMPORT + "\n</schema>")

    def test_exactly_one_import(self) -> None:
        patched = inject_wfs_import(read_data("describe_feature_type.xsd"))
        assert patched.count(WFS_20_NAMESPACE) == 1

    def test_rest_of_text_unchanged(self) -> None:
        text = read_data("describe_feature_type.xsd")
        patched = inject_wfs_import(text)
        assert patched.replace(_IMPORT + "\n", "") == text

    def test_prefixed_closing_tag(self) -> None:
        text = '<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"></xs:schema>'
        patched = inject_wfs_import(text)
        assert patched.endswith("<xs:" + _IMPORT[1:] + "\n</xs:schema>")

    def test_closing_tag_in_annotation_ignored(self) -> None:
        text = (
            '<schema xmlns="http://www.w3.org/2001/XMLSchema">'
            "<annotation><documentation>&lt;/schema&gt; <!-- </schema> --></documentation>"
            "</annotation></schema>\n<!-- trailing comment -->\n"
        )
        patched = inject_wfs_import(text)
        assert patched.count("<import ") == 1
        assert patched.index("<import ") > patched.index("</annotation>")
        assert patched.endswith("</schema>\n<!-- trailing comment -->\n")

    def test_custom_location(self) -> None:
        patched = inject_wfs_import(
            "<schema></schema>", schema_location="http://mirror.example.org/wfs.xsd?a=1&b=2"
        )
        assert 'schemaLocation="http://mirror.example.org/wfs.xsd?a=1&amp;b=2"' in patched

    def test_no_closing_tag(self) -> None:
        with pytest.raises(SchemaBuildFailure, match="no closing schema tag"):
            inject_wfs_import("<schema/>")

    def test_patched_schema_is_well_formed(self) -> None:
        patched = inject_wfs_import(read_data("describe_feature_type.xsd"))
        root = etree.fromstring(patched.encode("utf-8"))
        imports = [child.get("namespace") for child in root]
        assert imports == ["http://example.org/ns/tn", WFS_20_NAMESPACE]


class TestCompileSchema:
    def test_compiles_with_remote_imports(self, service: FakeTransport) -> None:
        patched = inject_wfs_import(read_data("describe_feature_type.xsd"))
        compiled = compile_schema(patched, service, base_url=describe_feature_type_url(ENDPOINT))
        assert isinstance(compiled.schema, etree.XMLSchema)
        assert compiled.documents_fetched == 2
        assert TN_SCHEMA_URL in service.requested
        assert WFS_20_SCHEMA_LOCATION in service.requested

    def test_not_well_formed(self, transport: FakeTransport) -> None:
        with pytest.raises(SchemaBuildFailure, match="not well-formed"):
            compile_schema("<schema><element></schema>", transport)

    def test_not_a_schema(self, transport: FakeTransport) -> None:
        with pytest.raises(SchemaBuildFailure, match="does not compile"):
            compile_schema(
                '<schema xmlns="http://www.w3.org/2001/XMLSchema"><bogus/></schema>', transport
            )


class TestBuildCombinedSchema:
    def test_builds_once_from_describe_feature_type(self, service: FakeTransport) -> None:
        compiled = build_combined_schema(ENDPOINT, service)
        assert compiled.source_url == describe_feature_type_url(ENDPOINT)
        assert service.requested[0] == describe_feature_type_url(ENDPOINT)
        assert compiled.text.count(WFS_20_NAMESPACE) == 1

    def test_validates_feature_collection(self, service: FakeTransport) -> None:
        compiled = build_combined_schema(ENDPOINT, service)
        document = etree.fromstring(read_data("features_road_valid.xml").encode("utf-8"))
        assert compiled.schema.validate(document) is True

    def test_request_failure(self, transport: FakeTransport) -> None:
        transport.responses[describe_feature_type_url(ENDPOINT)] = TransportError("timed out")
        with pytest.raises(SchemaBuildFailure, match="DescribeFeatureType request failed"):
            build_combined_schema(ENDPOINT, transport)

    def test_custom_wfs_schema_location(self, service: FakeTransport) -> None:
        mirror = "http://mirror.example.org/wfs/2.0/wfs.xsd"
        service.responses[mirror] = read_data("wfs.xsd")
        build_combined_schema(ENDPOINT, service, wfs_schema_location=mirror)
        assert mirror in service.requested
        assert WFS_20_SCHEMA_LOCATION not in service.requested
