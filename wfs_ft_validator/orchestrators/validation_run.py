"""Validation run orchestrator.

Drives one run against a service endpoint:

1. **Capabilities**: GetCapabilities, feature type enumeration.
2. **Schema**: combined schema, built once and shared by every type.
3. **Feature types**: for each type in enumeration order: GetFeature,
   href check and schema validation.

Only a capabilities failure or a schema build failure aborts the run.
Every other problem is isolated to its feature type, logged, and
counted in the returned ``RunSummary``; one bad feature type never
prevents the remaining ones from being checked.

The run is strictly sequential: one request at a time, no shared state
besides the summary it builds and the compiled schema.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from wfs_ft_validator.activities.build_schema import build_combined_schema
from wfs_ft_validator.activities.check_hrefs import check_hrefs
from wfs_ft_validator.activities.read_capabilities import read_feature_types
from wfs_ft_validator.activities.validate_features import validate_feature_response
from wfs_ft_validator.core.config import ValidatorConfig
from wfs_ft_validator.core.exceptions import (
    CapabilitiesFailure,
    EmptyCapabilities,
    FeatureValidationError,
    MalformedCapabilities,
    MissingFeatureType,
    SchemaBuildFailure,
    TransportError,
    TypeFetchFailure,
)
from wfs_ft_validator.models.outcome import FeatureTypeOutcome, RunSummary
from wfs_ft_validator.utils.kvp import capabilities_url, get_feature_url
from wfs_ft_validator.utils.xml import DocumentParseError, parse_document

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wfs_ft_validator.activities.build_schema import CompiledSchema
    from wfs_ft_validator.core.exceptions import PipelineError
    from wfs_ft_validator.transport.base import Transport

logger = logging.getLogger("wfs_ft_validator.orchestrators.validation_run")


class ValidationRun:
    """A single validation run of one WFS endpoint.

    Args:
        endpoint: Service base URL; immutable for the run.
        transport: Transport used for every request of the run.
        config: Validator configuration (feature count, schema location).
        required_types: Feature type names the service must advertise.
        run_id: Run identifier; generated when empty.
    """

    def __init__(
        self,
        endpoint: str,
        transport: Transport,
        config: ValidatorConfig | None = None,
        *,
        required_types: Iterable[str] = (),
        run_id: str = "",
    ) -> None:
        self._endpoint = endpoint
        self._transport = transport
        self._config = config or ValidatorConfig()
        self._required_types = tuple(required_types)
        self._run_id = run_id or uuid.uuid4().hex[:12]

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def run_id(self) -> str:
        return self._run_id

    def run(self) -> RunSummary:
        """Execute the run and return its summary.

        Never raises for service failures: a fatal phase failure is
        recorded in ``RunSummary.fatal_error`` and ends the run early.
        """
        started = time.monotonic()
        summary = RunSummary(endpoint=self._endpoint, run_id=self._run_id)
        logger.info("Validating service: %s | run_id=%s", self._endpoint, self._run_id)

        try:
            type_names = self._enumerate_feature_types(summary)
            self._check_required_types(type_names, summary)
            schema = self._build_schema()
        except (CapabilitiesFailure, SchemaBuildFailure) as exc:
            exc.correlation_id = self._run_id
            summary.fatal_error = exc.to_error_dict()
            logger.error("phase=%s aborted | run_id=%s | %s", exc.stage, self._run_id, exc)
            return summary

        for index, type_name in enumerate(type_names):
            logger.info(
                "phase=feature_types step=%d/%d | type=%s",
                index + 1,
                len(type_names),
                type_name,
            )
            summary.outcomes.append(self._validate_feature_type(type_name, schema))

        logger.info(
            "Run completed | run_id=%s | feature_types=%d | errors=%d | duration=%.1fs",
            self._run_id,
            len(type_names),
            summary.error_count,
            time.monotonic() - started,
        )
        return summary

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _enumerate_feature_types(self, summary: RunSummary) -> list[str]:
        """GetCapabilities and feature type enumeration.

        A blank body is counted as an error but does not abort the run;
        it simply yields no feature types.

        Raises:
            CapabilitiesFailure: If the request fails or a non-blank
                body is not XML.
        """
        url = capabilities_url(self._endpoint)
        logger.info("phase=capabilities | url=%s", url)

        try:
            text = self._transport.fetch_text(url)
        except TransportError as exc:
            msg = f"GetCapabilities request failed: {exc}"
            raise CapabilitiesFailure(msg) from exc

        if not text.strip():
            logger.warning("Capabilities response without content | url=%s", url)
            self._record(summary, EmptyCapabilities("Capabilities response without content"))
            return []

        try:
            document = parse_document(text)
        except DocumentParseError as exc:
            msg = f"GetCapabilities response is not XML: {exc}"
            raise CapabilitiesFailure(msg) from exc

        result = read_feature_types(document)
        for error in result.malformed:
            self._record(summary, error)

        summary.feature_types = list(result.type_names)
        logger.info(
            "phase=capabilities completed | feature_types=%d | names=%s",
            len(result.type_names),
            ", ".join(result.type_names),
        )
        return list(result.type_names)

    def _check_required_types(self, type_names: list[str], summary: RunSummary) -> None:
        advertised = set(type_names)
        for required in self._required_types:
            if required not in advertised:
                error = MissingFeatureType(f"Required feature type {required} is not advertised")
                logger.warning("%s", error.message)
                self._record(summary, error)

    def _build_schema(self) -> CompiledSchema:
        logger.info("phase=schema | Building schema for WFS")
        return build_combined_schema(
            self._endpoint,
            self._transport,
            wfs_schema_location=self._config.wfs_schema_location,
        )

    def _validate_feature_type(self, type_name: str, schema: CompiledSchema) -> FeatureTypeOutcome:
        """Fetch a sample of *type_name*, check its hrefs and its schema validity."""
        url = get_feature_url(self._endpoint, type_name, self._config.feature_count)
        outcome = FeatureTypeOutcome(type_name=type_name, request_url=url)

        try:
            text = self._transport.fetch_text(url)
        except TransportError as exc:
            error = TypeFetchFailure(
                f"Error requesting feature type {type_name}: {exc}",
                correlation_id=self._run_id,
            )
            logger.warning("%s | url=%s", error.message, url)
            outcome.fetch_error = error.message
            return outcome

        if not text.strip():
            logger.warning("Empty GetFeature response, skipping | type=%s", type_name)
            outcome.skipped = True
            return outcome

        # Links and schema are checked independently; both count.
        try:
            document = parse_document(text)
        except DocumentParseError as exc:
            logger.warning("No href check for %s: %s", type_name, exc)
        else:
            hrefs = check_hrefs(document, self._endpoint, self._transport)
            outcome.hrefs_checked = hrefs.checked
            outcome.broken_links = list(hrefs.broken)

        try:
            outcome.violations = validate_feature_response(text, schema)
        except FeatureValidationError as exc:
            logger.warning("Error validating feature type %s: %s", type_name, exc)
            outcome.validation_error = exc.message

        for violation in outcome.violations:
            logger.warning(
                "Error validating schema | type=%s | %s", type_name, violation.describe()
            )

        if outcome.schema_valid:
            logger.info("FeatureType is valid | type=%s", type_name)

        logger.info(
            "Feature type checked | type=%s | violations=%d | hrefs=%d | broken=%d | errors=%d",
            type_name,
            len(outcome.violations),
            outcome.hrefs_checked,
            len(outcome.broken_links),
            outcome.error_count,
        )
        return outcome

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(self, summary: RunSummary, error: PipelineError) -> None:
        """Charge a run-level (not type-specific) error to *summary*."""
        error.correlation_id = self._run_id
        summary.run_errors.append(error.to_error_dict())


def run_validation(
    endpoint: str,
    transport: Transport,
    config: ValidatorConfig | None = None,
    *,
    required_types: Iterable[str] = (),
) -> RunSummary:
    """Validate *endpoint* and return the ``RunSummary``."""
    return ValidationRun(
        endpoint,
        transport,
        config,
        required_types=required_types,
    ).run()
