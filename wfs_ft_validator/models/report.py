"""Pydantic model of the JSON run report.

The report is an optional artefact of a single run (``--report PATH``):
what was requested, what each feature type produced, and the final
error count.  It is written once and never read back by the tool.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from wfs_ft_validator.models.outcome import RunSummary

SCHEMA_VERSION = "wfs-validation-report-v1"


class ViolationEntry(BaseModel):
    """A single schema validator message."""

    level: str
    line: int = 0
    column: int = 0
    message: str
    domain: str = ""


class BrokenLinkEntry(BaseModel):
    url: str
    reason: str = ""


class FeatureTypeEntry(BaseModel):
    """Per feature type section of the report.

    Attributes:
        type_name: Qualified feature type name.
        request_url: GetFeature URL that was requested.
        status: ``"ok"``, ``"failed"``, ``"fetch-failed"`` or ``"skipped"``.
        fetch_error: Transport failure message for the GetFeature request.
        validation_error: Failure message of the schema validator itself.
        violations: Schema validator messages in document order.
        hrefs_checked: Number of in-service hrefs probed.
        broken_links: In-service hrefs that could not be fetched.
        error_count: Errors charged to the run for this type.
    """

    type_name: str
    request_url: str = ""
    status: str = "ok"
    fetch_error: str = ""
    validation_error: str = ""
    violations: list[ViolationEntry] = Field(default_factory=list)
    hrefs_checked: int = 0
    broken_links: list[BrokenLinkEntry] = Field(default_factory=list)
    error_count: int = 0


class RunReport(BaseModel):
    """Top-level JSON report of a validation run."""

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    run_id: str = ""
    endpoint: str
    generated_at: str = ""
    feature_types: list[str] = Field(default_factory=list)
    results: list[FeatureTypeEntry] = Field(default_factory=list)
    run_errors: list[dict[str, Any]] = Field(default_factory=list)
    fatal_error: dict[str, Any] | None = None
    error_count: int = 0
    succeeded: bool = True

    model_config = {"populate_by_name": True}

    @classmethod
    def from_summary(cls, summary: RunSummary, *, generated_at: str = "") -> RunReport:
        """Build the report from a ``RunSummary``.

        Args:
            summary: The finished run.
            generated_at: ISO 8601 timestamp; the current UTC time if empty.
        """
        if not generated_at:
            generated_at = datetime.now(UTC).isoformat()

        results = [
            FeatureTypeEntry(
                type_name=outcome.type_name,
                request_url=outcome.request_url,
                status=outcome.status,
                fetch_error=outcome.fetch_error,
                validation_error=outcome.validation_error,
                violations=[ViolationEntry(**v.to_dict()) for v in outcome.violations],
                hrefs_checked=outcome.hrefs_checked,
                broken_links=[BrokenLinkEntry(**b.to_dict()) for b in outcome.broken_links],
                error_count=outcome.error_count,
            )
            for outcome in summary.outcomes
        ]

        return cls(
            run_id=summary.run_id,
            endpoint=summary.endpoint,
            generated_at=generated_at,
            feature_types=list(summary.feature_types),
            results=results,
            run_errors=[dict(e) for e in summary.run_errors],
            fatal_error=dict(summary.fatal_error) if summary.fatal_error else None,
            error_count=summary.error_count,
            succeeded=summary.succeeded,
        )

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a JSON string using the ``$schema`` alias."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def write(self, path: Path | str) -> Path:
        """Write the report to *path*, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json() + "\n", encoding="utf-8")
        return path
