"""Schema builder: the combined, envelope-patched schema of a service.

A WFS 2.0 GetFeature response is wrapped in ``wfs:FeatureCollection``,
but the schema a service returns from DescribeFeatureType only describes
its own feature types.  The builder therefore:

1. requests DescribeFeatureType for *all* feature types (no ``TYPENAME``),
2. inserts an ``import`` of the WFS 2.0 namespace right before the
   closing schema tag, as a plain text edit so that the rest of the
   service's schema text is compiled exactly as served,
3. compiles the result with ``lxml.etree.XMLSchema``.  Remote imports
   and includes are fetched through the run's ``Transport``.

The compiled schema is built once per run.  Every failure raises
``SchemaBuildFailure``, which aborts the run.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from xml.sax.saxutils import quoteattr

from lxml import etree

from wfs_ft_validator.core.constants import WFS_20_NAMESPACE, WFS_20_SCHEMA_LOCATION
from wfs_ft_validator.core.exceptions import SchemaBuildFailure, TransportError
from wfs_ft_validator.utils.kvp import describe_feature_type_url
from wfs_ft_validator.utils.xml import SchemaResolver, strip_xml_declaration

if TYPE_CHECKING:
    from wfs_ft_validator.transport.base import Transport

logger = logging.getLogger("wfs_ft_validator.activities.build_schema")

_CLOSING_SCHEMA_TAG = re.compile(r"</(?:(?P<prefix>[A-Za-z_][\w.\-]*):)?schema\s*>")

# Only whitespace, comments and processing instructions may follow the root.
_DOCUMENT_TAIL = re.compile(r"(?:\s+|<!--.*?-->|<\?.*?\?>)*", re.DOTALL)


@dataclass(frozen=True, slots=True)
class CompiledSchema:
    """A compiled, reusable schema.

    Attributes:
        schema: The compiled lxml schema object.
        source_url: URL the schema text was requested from.
        text: The patched schema text that was compiled.
        documents_fetched: Number of imported/included schema documents
            fetched while compiling.
    """

    schema: etree.XMLSchema
    source_url: str = ""
    text: str = ""
    documents_fetched: int = 0


def inject_wfs_import(schema_text: str, *, schema_location: str = WFS_20_SCHEMA_LOCATION) -> str:
    """Insert the WFS 2.0 ``import`` immediately before the closing schema tag.

    The closing tag is the last ``</schema>`` (or ``</prefix:schema>``)
    that is followed by nothing but whitespace, comments or processing
    instructions; ``</schema>`` text appearing earlier (in annotations,
    comments or CDATA) is left alone.  A prefixed closing tag gets a
    prefixed ``import`` element.

    Raises:
        SchemaBuildFailure: If the text has no closing schema tag.
    """
    closing = None
    for match in reversed(list(_CLOSING_SCHEMA_TAG.finditer(schema_text))):
        if _DOCUMENT_TAIL.fullmatch(schema_text, match.end()):
            closing = match
            break

    if closing is None:
        msg = "DescribeFeatureType response has no closing schema tag"
        raise SchemaBuildFailure(msg)

    prefix = closing.group("prefix")
    tag = f"{prefix}:import" if prefix else "import"
    element = (
        f"<{tag} namespace={quoteattr(WFS_20_NAMESPACE)} "
        f"schemaLocation={quoteattr(schema_location)}/>\n"
    )
    return schema_text[: closing.start()] + element + schema_text[closing.start() :]


def compile_schema(
    schema_text: str,
    transport: Transport,
    *,
    base_url: str | None = None,
) -> CompiledSchema:
    """Compile *schema_text*, fetching remote imports via *transport*.

    Raises:
        SchemaBuildFailure: If the text is not well-formed XML or not a
            valid XML Schema (including unresolvable imports).
    """
    resolver = SchemaResolver(transport)
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    parser.resolvers.add(resolver)

    try:
        document = etree.fromstring(
            strip_xml_declaration(schema_text), parser=parser, base_url=base_url
        )
    except etree.XMLSyntaxError as exc:
        msg = f"Schema is not well-formed XML: {exc}"
        raise SchemaBuildFailure(msg) from exc

    try:
        schema = etree.XMLSchema(document)
    except etree.XMLSchemaParseError as exc:
        msg = f"Schema does not compile: {exc}"
        if resolver.failures:
            msg = f"{msg} (unresolved: {'; '.join(resolver.failures)})"
        raise SchemaBuildFailure(msg) from exc

    return CompiledSchema(
        schema=schema,
        source_url=base_url or "",
        text=schema_text,
        documents_fetched=resolver.fetched_count,
    )


def build_combined_schema(
    endpoint: str,
    transport: Transport,
    *,
    wfs_schema_location: str = WFS_20_SCHEMA_LOCATION,
) -> CompiledSchema:
    """Request, patch and compile the combined schema of *endpoint*.

    Args:
        endpoint: Service base URL.
        transport: Transport for the DescribeFeatureType request and for
            every imported schema document.
        wfs_schema_location: Location of the WFS 2.0 schema to import.

    Returns:
        The ``CompiledSchema`` shared by every feature type of the run.

    Raises:
        SchemaBuildFailure: If the request fails or the schema does not
            compile.
    """
    url = describe_feature_type_url(endpoint)
    logger.info("Building combined schema | url=%s", url)

    try:
        schema_text = transport.fetch_text(url)
    except TransportError as exc:
        msg = f"DescribeFeatureType request failed: {exc}"
        raise SchemaBuildFailure(msg) from exc

    patched = inject_wfs_import(schema_text, schema_location=wfs_schema_location)
    compiled = compile_schema(patched, transport, base_url=url)

    logger.info(
        "Combined schema compiled | url=%s | imported_documents=%d",
        url,
        compiled.documents_fetched,
    )
    return compiled
