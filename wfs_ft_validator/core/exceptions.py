"""Unified exception taxonomy for the validator.

Every domain exception inherits from ``PipelineError`` and carries
structured context fields, so that run-level accounting, logging and
the JSON report can treat all failures the same way.

Taxonomy categories
-------------------
- ``ValidationError``: invalid user input or configuration, never retryable.
- ``TransientError``: network level failures (timeouts, HTTP errors).
- ``PermanentError``: unrecoverable failures of a run phase.
- ``ContractError``: the service deviates from the WFS document contract.

Only ``CapabilitiesFailure`` and ``SchemaBuildFailure`` abort a run.
Everything else is isolated to its feature type and folded into the
run's error count.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all validator errors.

    Attributes:
        message: Human-readable error description.
        stage: Run phase where the error occurred
            (e.g. ``"capabilities"``, ``"feature_types"``).
        code: Machine-readable error code (e.g. ``"SCHEMA_BUILD_FAILED"``).
        retryable: Whether repeating the request could plausibly succeed.
        correlation_id: Identifier of the validation run.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or configuration validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PipelineError):
    """Network level failure that may succeed on a later run."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable failure of a run phase. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(PipelineError):
    """Service response deviates from the WFS document contract."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class TransportError(TransientError):
    """An HTTP GET could not be completed.

    Attributes:
        url: The requested URL.
        status_code: HTTP status of the response, ``None`` when no
            response was received.
    """

    default_stage = "transport"
    default_code = "TRANSPORT_FAILED"

    def __init__(
        self,
        message: str = "",
        *,
        url: str = "",
        status_code: int | None = None,
        **kwargs: object,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message, **kwargs)


class CapabilitiesFailure(PermanentError):
    """GetCapabilities could not be fetched or parsed. Aborts the run."""

    default_stage = "capabilities"
    default_code = "CAPABILITIES_FAILED"


class MalformedCapabilities(ContractError):
    """A ``FeatureType`` entry in the capabilities has no ``Name``."""

    default_stage = "capabilities"
    default_code = "CAPABILITIES_MALFORMED"


class EmptyCapabilities(ContractError):
    """The capabilities response has no content."""

    default_stage = "capabilities"
    default_code = "CAPABILITIES_EMPTY"


class MissingFeatureType(ContractError):
    """A required feature type is not advertised by the service."""

    default_stage = "capabilities"
    default_code = "FEATURE_TYPE_MISSING"


class SchemaBuildFailure(PermanentError):
    """The combined schema could not be fetched or compiled. Aborts the run."""

    default_stage = "schema"
    default_code = "SCHEMA_BUILD_FAILED"


class TypeFetchFailure(TransientError):
    """GetFeature for a single feature type failed."""

    default_stage = "feature_types"
    default_code = "FEATURE_FETCH_FAILED"


class FeatureValidationError(PermanentError):
    """The schema validator itself failed on a feature response."""

    default_stage = "feature_types"
    default_code = "FEATURE_VALIDATION_FAILED"
