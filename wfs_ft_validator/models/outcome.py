"""Result records of a validation run.

A run produces one ``FeatureTypeOutcome`` per enumerated feature type and
folds them, together with the run-level errors, into a ``RunSummary``.
The summary is the only state handed back to the caller; nothing is
counted in module or class level globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wfs_ft_validator.core.constants import EXIT_ERRORS, EXIT_OK


@dataclass(frozen=True, slots=True)
class SchemaViolation:
    """A single message reported while validating a feature response.

    Attributes:
        level: ``"WARNING"``, ``"ERROR"`` or ``"FATAL"``.
        line: Line number in the feature response (0 if unknown).
        column: Column number in the feature response (0 if unknown).
        message: The validator's message.
        domain: libxml2 error domain (e.g. ``"SCHEMASV"``, ``"PARSER"``).
    """

    level: str
    line: int
    column: int
    message: str
    domain: str = ""

    def describe(self) -> str:
        """Return ``line:column [LEVEL] message``."""
        return f"{self.line}:{self.column} [{self.level}] {self.message}"

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "domain": self.domain,
        }


@dataclass(frozen=True, slots=True)
class BrokenLink:
    """An in-service href that could not be fetched."""

    url: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {"url": self.url, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class HrefCheckResult:
    """Outcome of probing the in-service hrefs of one feature response.

    Attributes:
        checked: Number of matching hrefs that were requested.
        broken: The hrefs whose request failed, in document order.
    """

    checked: int = 0
    broken: list[BrokenLink] = field(default_factory=list)

    @property
    def reachable(self) -> int:
        return self.checked - len(self.broken)


@dataclass(slots=True)
class FeatureTypeOutcome:
    """Validation outcome for a single feature type.

    Attributes:
        type_name: Qualified feature type name (e.g. ``"tn-a:AerodromeArea"``).
        request_url: The GetFeature URL that was requested.
        skipped: The service answered with an empty body.
        fetch_error: Message of the GetFeature transport failure, if any.
        validation_error: Message of a failure of the schema validator
            itself, if any.
        violations: Every message reported by the schema validator.
        hrefs_checked: Number of in-service hrefs that were probed.
        broken_links: In-service hrefs that could not be fetched.
    """

    type_name: str
    request_url: str = ""
    skipped: bool = False
    fetch_error: str = ""
    validation_error: str = ""
    violations: list[SchemaViolation] = field(default_factory=list)
    hrefs_checked: int = 0
    broken_links: list[BrokenLink] = field(default_factory=list)

    @property
    def schema_valid(self) -> bool:
        """Whether the sample was validated and produced no violations."""
        return not (self.skipped or self.fetch_error or self.validation_error or self.violations)

    @property
    def error_count(self) -> int:
        """Errors charged to the run for this type.

        A fetch failure, a validator failure and a non-empty violation list
        count one each; every broken link counts on its own.
        """
        count = len(self.broken_links)
        if self.fetch_error:
            count += 1
        if self.validation_error:
            count += 1
        if self.violations:
            count += 1
        return count

    @property
    def status(self) -> str:
        if self.skipped:
            return "skipped"
        if self.fetch_error:
            return "fetch-failed"
        return "ok" if self.error_count == 0 else "failed"

    def to_dict(self) -> dict[str, object]:
        return {
            "type_name": self.type_name,
            "request_url": self.request_url,
            "status": self.status,
            "skipped": self.skipped,
            "fetch_error": self.fetch_error,
            "validation_error": self.validation_error,
            "violations": [v.to_dict() for v in self.violations],
            "hrefs_checked": self.hrefs_checked,
            "broken_links": [link.to_dict() for link in self.broken_links],
            "error_count": self.error_count,
        }


@dataclass(slots=True)
class RunSummary:
    """Aggregate result of a validation run.

    Attributes:
        endpoint: The service base URL under test.
        run_id: Identifier of the run, used as error correlation id.
        feature_types: Feature type names enumerated from the capabilities.
        outcomes: Per-type outcomes in enumeration order.
        run_errors: Structured payloads (``PipelineError.to_error_dict()``)
            of errors that belong to the run rather than to one type.
        fatal_error: Payload of the error that aborted the run, if any.
    """

    endpoint: str
    run_id: str = ""
    feature_types: list[str] = field(default_factory=list)
    outcomes: list[FeatureTypeOutcome] = field(default_factory=list)
    run_errors: list[dict[str, object]] = field(default_factory=list)
    fatal_error: dict[str, object] | None = None

    @property
    def aborted(self) -> bool:
        return self.fatal_error is not None

    @property
    def error_count(self) -> int:
        """Run-level errors plus the error count of every feature type."""
        count = len(self.run_errors) + sum(o.error_count for o in self.outcomes)
        if self.fatal_error is not None:
            count += 1
        return count

    @property
    def succeeded(self) -> bool:
        return self.error_count == 0

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.succeeded else EXIT_ERRORS

    def to_dict(self) -> dict[str, object]:
        return {
            "endpoint": self.endpoint,
            "run_id": self.run_id,
            "feature_types": list(self.feature_types),
            "outcomes": [o.to_dict() for o in self.outcomes],
            "run_errors": [dict(e) for e in self.run_errors],
            "fatal_error": dict(self.fatal_error) if self.fatal_error else None,
            "error_count": self.error_count,
            "succeeded": self.succeeded,
        }
