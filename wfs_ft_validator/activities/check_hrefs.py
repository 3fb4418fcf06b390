"""Href checker: reachability of in-service links in a feature response.

Every attribute whose local name is ``href`` is considered, on any
element and with or without a namespace prefix (``xlink:href`` in
practice).  Only values containing the service endpoint are requested;
links to external resources are left alone.

A failed request becomes one ``BrokenLink`` and checking carries on with
the remaining hrefs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree

from wfs_ft_validator.core.exceptions import TransportError
from wfs_ft_validator.models.outcome import BrokenLink, HrefCheckResult
from wfs_ft_validator.utils.xml import local_name

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import _Element

    from wfs_ft_validator.transport.base import Transport

logger = logging.getLogger("wfs_ft_validator.activities.check_hrefs")


def iter_service_hrefs(document: _Element, endpoint: str) -> Iterator[str]:
    """Yield href values containing *endpoint*, in document order."""
    for element in document.iter(etree.Element):
        for name, value in element.attrib.items():
            if local_name(name) == "href" and endpoint in value:
                yield value


def check_hrefs(document: _Element, endpoint: str, transport: Transport) -> HrefCheckResult:
    """Request every in-service href of *document*.

    Args:
        document: Root element of a parsed GetFeature response.
        endpoint: Service base URL; hrefs must contain it to be checked.
        transport: Transport used for the requests.

    Returns:
        ``HrefCheckResult`` with the number of hrefs requested and the
        ones that failed.
    """
    checked = 0
    broken: list[BrokenLink] = []

    for url in iter_service_hrefs(document, endpoint):
        checked += 1
        try:
            transport.fetch_text(url)
        except TransportError as exc:
            logger.warning("Wrong URL: %s (%s)", url, exc)
            broken.append(BrokenLink(url=url, reason=str(exc)))

    logger.info("Number of URLs found: %d | broken=%d", checked, len(broken))
    return HrefCheckResult(checked=checked, broken=broken)
