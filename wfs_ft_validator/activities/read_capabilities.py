"""Capabilities reader: feature type names from a GetCapabilities document.

Element lookup is by local name, the way a namespace-unaware DOM would
see the document: every ``FeatureType`` element, and within it the first
descendant ``Name`` element.  Names are returned verbatim, in document
order and without de-duplication.

A ``FeatureType`` without a usable ``Name`` does not stop extraction.
The entry is skipped and reported as ``MalformedCapabilities`` so the
orchestrator can charge it to the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wfs_ft_validator.core.exceptions import MalformedCapabilities
from wfs_ft_validator.utils.xml import iter_elements

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("wfs_ft_validator.activities.read_capabilities")


@dataclass(slots=True)
class CapabilitiesReadResult:
    """Feature type names plus the entries that had to be skipped."""

    type_names: list[str] = field(default_factory=list)
    malformed: list[MalformedCapabilities] = field(default_factory=list)


def read_feature_types(document: _Element) -> CapabilitiesReadResult:
    """Extract the advertised feature type names from *document*.

    Args:
        document: Root element of a parsed GetCapabilities response.

    Returns:
        A ``CapabilitiesReadResult``; ``type_names`` is empty when the
        document advertises no feature types.
    """
    result = CapabilitiesReadResult()

    for index, feature_type in enumerate(iter_elements(document, "FeatureType")):
        name_element = next(iter_elements(feature_type, "Name"), None)
        name = (name_element.text or "").strip() if name_element is not None else ""
        if not name:
            error = MalformedCapabilities(
                f"FeatureType entry #{index} (line {feature_type.sourceline}) "
                "has no Name element"
            )
            logger.warning("Skipping malformed capabilities entry: %s", error.message)
            result.malformed.append(error)
            continue

        result.type_names.append(name)

    logger.info(
        "Capabilities read | feature_types=%d | malformed=%d",
        len(result.type_names),
        len(result.malformed),
    )
    return result
