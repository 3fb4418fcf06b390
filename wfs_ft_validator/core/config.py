"""Validator configuration loaded from environment variables.

Every value has a default, so the tool runs without any environment set.
Command line options are applied on top with ``with_overrides()``.

Fail-fast validation:
    ``from_env()`` and ``with_overrides()`` raise ``ConfigValidationError``
    if a value is out of its valid range, before any request is made.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from wfs_ft_validator import __version__
from wfs_ft_validator.core.constants import DEFAULT_FEATURE_COUNT, WFS_20_SCHEMA_LOCATION
from wfs_ft_validator.core.exceptions import ValidationError

DEFAULT_HTTP_TIMEOUT_S = 60.0
DEFAULT_USER_AGENT = f"wfs-ft-validator/{__version__}"
DEFAULT_LOG_LEVEL = "INFO"


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ValidatorConfig:
    """Immutable validator configuration.

    Loaded once at startup and handed to the validation run.

    Attributes:
        feature_count: Number of features requested per feature type.
        http_timeout_s: Timeout in seconds for every HTTP request.
        user_agent: ``User-Agent`` header sent with every request.
        wfs_schema_location: Location of the WFS 2.0 schema that is
            imported into the combined schema.
        log_level: Name of the stdlib logging level.
    """

    feature_count: int = DEFAULT_FEATURE_COUNT
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    wfs_schema_location: str = WFS_20_SCHEMA_LOCATION
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``WFS_VALIDATOR_FEATURE_COUNT=abc``).
        """
        config = cls(
            feature_count=int(
                os.getenv("WFS_VALIDATOR_FEATURE_COUNT", str(DEFAULT_FEATURE_COUNT))
            ),
            http_timeout_s=float(
                os.getenv("WFS_VALIDATOR_HTTP_TIMEOUT_S", str(DEFAULT_HTTP_TIMEOUT_S))
            ),
            user_agent=os.getenv("WFS_VALIDATOR_USER_AGENT", DEFAULT_USER_AGENT),
            wfs_schema_location=os.getenv(
                "WFS_VALIDATOR_WFS_SCHEMA_LOCATION", WFS_20_SCHEMA_LOCATION
            ),
            log_level=os.getenv("WFS_VALIDATOR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
        _validate(config)
        return config

    def with_overrides(self, **overrides: object) -> ValidatorConfig:
        """Return a validated copy with the non-``None`` overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        config = replace(self, **changes)  # type: ignore[arg-type]
        _validate(config)
        return config


def _validate(config: ValidatorConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.feature_count < 1:
        raise ConfigValidationError(
            "WFS_VALIDATOR_FEATURE_COUNT",
            config.feature_count,
            "must be >= 1",
        )

    if config.http_timeout_s <= 0:
        raise ConfigValidationError(
            "WFS_VALIDATOR_HTTP_TIMEOUT_S",
            config.http_timeout_s,
            "must be > 0 (seconds)",
        )

    if not config.user_agent:
        raise ConfigValidationError(
            "WFS_VALIDATOR_USER_AGENT",
            config.user_agent,
            "must not be empty",
        )

    if not config.wfs_schema_location:
        raise ConfigValidationError(
            "WFS_VALIDATOR_WFS_SCHEMA_LOCATION",
            config.wfs_schema_location,
            "must not be empty",
        )

    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigValidationError(
            "WFS_VALIDATOR_LOG_LEVEL",
            config.log_level,
            "must be a logging level name (DEBUG, INFO, WARNING, ERROR)",
        )
