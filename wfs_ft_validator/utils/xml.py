"""XML parsing glue on top of lxml.

Two parsers are used:

- ``parse_document`` is lenient.  Capabilities and feature responses are
  navigated by local name only, and services regularly emit documents
  with undeclared prefixes, so the parser recovers from namespace errors.
- ``parse_strict`` is namespace-aware and fails on any error.  It feeds
  the schema validator, which must see the document exactly as sent.

``SchemaResolver`` routes the remote ``import``/``include`` locations of
a schema through the validator's ``Transport``.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from lxml import etree

from wfs_ft_validator.core.exceptions import ContractError, TransportError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import _Element

    from wfs_ft_validator.transport.base import Transport

logger = logging.getLogger("wfs_ft_validator.utils.xml")

_XML_DECLARATION = re.compile(r"^\s*<\?xml\s[^>]*\?>")


class DocumentParseError(ContractError):
    """Raised when a response body cannot be parsed as XML at all."""

    default_stage = "parse"
    default_code = "XML_PARSE_FAILED"


def strip_xml_declaration(text: str) -> str:
    """Remove a leading BOM and XML declaration.

    lxml refuses ``str`` input that still carries an ``encoding``
    declaration; the text has already been decoded by the transport.
    """
    return _XML_DECLARATION.sub("", text.lstrip("\ufeff"), count=1)


def local_name(name: str) -> str:
    """Return the local part of ``{ns}name``, ``prefix:name`` or ``name``."""
    return name.rsplit("}", 1)[-1].rsplit(":", 1)[-1]


def iter_elements(root: _Element, name: str) -> Iterator[_Element]:
    """Yield every element (root included) whose local name is *name*."""
    for element in root.iter(etree.Element):
        if local_name(element.tag) == name:
            yield element


def parse_document(text: str) -> _Element:
    """Parse *text* leniently, tolerating undeclared namespace prefixes.

    Raises:
        DocumentParseError: If no element tree can be recovered.
    """
    parser = etree.XMLParser(
        recover=True, resolve_entities=False, no_network=True, huge_tree=False
    )
    try:
        root = etree.fromstring(strip_xml_declaration(text), parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise DocumentParseError(msg) from exc

    if root is None:
        msg = "Not valid XML: no root element could be recovered"
        raise DocumentParseError(msg)
    return root


def parse_strict(text: str, *, base_url: str | None = None) -> _Element:
    """Parse *text* namespace-aware, failing on the first error.

    Raises:
        lxml.etree.XMLSyntaxError: If the document is not well-formed.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    return etree.fromstring(strip_xml_declaration(text), parser=parser, base_url=base_url)


class SchemaResolver(etree.Resolver):
    """Fetch remote schema documents through a ``Transport``.

    Documents are memoised by URL for the lifetime of the resolver, which
    matters for GML application schemas that import the same OGC schemas
    many times over.  A failed fetch is recorded in ``failures`` and left
    to libxml2, which then reports the unresolved import itself.
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__()
        self._transport = transport
        self._cache: dict[str, str] = {}
        self.failures: list[str] = []

    def resolve(self, system_url, public_id, context):  # type: ignore[no-untyped-def]
        if not system_url or not system_url.startswith(("http://", "https://")):
            return None

        text = self._cache.get(system_url)
        if text is None:
            try:
                text = strip_xml_declaration(self._transport.fetch_text(system_url))
            except TransportError as exc:
                logger.warning("Cannot fetch schema document %s: %s", system_url, exc)
                self.failures.append(f"{system_url}: {exc}")
                return None
            self._cache[system_url] = text
            logger.debug("Fetched schema document %s", system_url)

        return self.resolve_string(text, context, base_url=system_url)

    @property
    def fetched_count(self) -> int:
        """Number of distinct schema documents fetched so far."""
        return len(self._cache)
