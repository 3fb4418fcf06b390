"""Data models of a validation run.

- SchemaViolation, BrokenLink, HrefCheckResult: per-check results
- FeatureTypeOutcome: everything found for one feature type
- RunSummary: aggregate result and exit status of a run
- RunReport: pydantic model of the optional JSON report
"""

from wfs_ft_validator.models.outcome import (
    BrokenLink,
    FeatureTypeOutcome,
    HrefCheckResult,
    RunSummary,
    SchemaViolation,
)
from wfs_ft_validator.models.report import RunReport

__all__ = [
    "BrokenLink",
    "FeatureTypeOutcome",
    "HrefCheckResult",
    "RunReport",
    "RunSummary",
    "SchemaViolation",
]
