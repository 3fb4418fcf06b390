"""Feature validator: a feature response against the combined schema.

Validation collects every warning, error and fatal error the validator
reports instead of stopping at the first one.  A non-empty list is a
normal result; only a failure of the validator itself raises.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree

from wfs_ft_validator.core.exceptions import FeatureValidationError
from wfs_ft_validator.models.outcome import SchemaViolation
from wfs_ft_validator.utils.xml import parse_strict

if TYPE_CHECKING:
    from wfs_ft_validator.activities.build_schema import CompiledSchema

logger = logging.getLogger("wfs_ft_validator.activities.validate_features")


def _to_violations(error_log: etree._ListErrorLog) -> list[SchemaViolation]:
    return [
        SchemaViolation(
            level=entry.level_name,
            line=entry.line or 0,
            column=entry.column or 0,
            message=(entry.message or "").strip(),
            domain=entry.domain_name,
        )
        for entry in error_log
    ]


def validate_feature_response(text: str, schema: CompiledSchema) -> list[SchemaViolation]:
    """Validate the raw feature response *text* against *schema*.

    A response that is not well-formed XML is reported through its parser
    errors, which come out as ``FATAL`` violations.

    Returns:
        Every reported violation in document order; empty if valid.

    Raises:
        FeatureValidationError: If the validator fails on the document.
    """
    try:
        document = parse_strict(text)
    except etree.XMLSyntaxError as exc:
        return _to_violations(exc.error_log) or [
            SchemaViolation(level="FATAL", line=0, column=0, message=str(exc), domain="PARSER")
        ]

    validator = schema.schema
    try:
        validator.validate(document)
    except etree.LxmlError as exc:
        msg = f"Schema validation failed: {exc}"
        raise FeatureValidationError(msg) from exc

    return _to_violations(validator.error_log)
