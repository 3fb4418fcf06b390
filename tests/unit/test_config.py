"""Tests for validator configuration.

Covers:
- Default values
- Loading from environment variables
- Type coercion (string env vars to numeric fields)
- Fail-fast range validation
- Command line overrides
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from wfs_ft_validator.core.config import (
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_USER_AGENT,
    ConfigValidationError,
    ValidatorConfig,
)
from wfs_ft_validator.core.constants import DEFAULT_FEATURE_COUNT, WFS_20_SCHEMA_LOCATION

_ENV_KEYS = (
    "WFS_VALIDATOR_FEATURE_COUNT",
    "WFS_VALIDATOR_HTTP_TIMEOUT_S",
    "WFS_VALIDATOR_USER_AGENT",
    "WFS_VALIDATOR_WFS_SCHEMA_LOCATION",
    "WFS_VALIDATOR_LOG_LEVEL",
)


def _clean_env() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k not in _ENV_KEYS}


class TestValidatorConfigDefaults:
    """Verify default configuration values."""

    def test_default_feature_count(self) -> None:
        assert ValidatorConfig().feature_count == DEFAULT_FEATURE_COUNT == 10

    def test_default_timeout(self) -> None:
        assert ValidatorConfig().http_timeout_s == DEFAULT_HTTP_TIMEOUT_S

    def test_default_schema_location(self) -> None:
        cfg = ValidatorConfig()
        assert cfg.wfs_schema_location == WFS_20_SCHEMA_LOCATION
        assert cfg.wfs_schema_location == "http://schemas.opengis.net/wfs/2.0/wfs.xsd"

    def test_default_user_agent(self) -> None:
        assert ValidatorConfig().user_agent == DEFAULT_USER_AGENT
        assert DEFAULT_USER_AGENT.startswith("wfs-ft-validator/")

    def test_frozen(self) -> None:
        cfg = ValidatorConfig()
        with pytest.raises(AttributeError):
            cfg.feature_count = 5  # type: ignore[misc]


class TestValidatorConfigFromEnv:
    """Verify loading from environment variables."""

    def test_loads_from_environment(self) -> None:
        env = {
            "WFS_VALIDATOR_FEATURE_COUNT": "25",
            "WFS_VALIDATOR_HTTP_TIMEOUT_S": "12.5",
            "WFS_VALIDATOR_USER_AGENT": "inspire-monitor/2",
            "WFS_VALIDATOR_WFS_SCHEMA_LOCATION": "http://mirror.example.org/wfs/2.0/wfs.xsd",
            "WFS_VALIDATOR_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = ValidatorConfig.from_env()

        assert cfg.feature_count == 25
        assert cfg.http_timeout_s == 12.5
        assert cfg.user_agent == "inspire-monitor/2"
        assert cfg.wfs_schema_location == "http://mirror.example.org/wfs/2.0/wfs.xsd"
        assert cfg.log_level == "DEBUG"

    def test_defaults_when_env_missing(self) -> None:
        with patch.dict(os.environ, _clean_env(), clear=True):
            cfg = ValidatorConfig.from_env()
        assert cfg == ValidatorConfig()

    def test_non_numeric_count_raises_value_error(self) -> None:
        with (
            patch.dict(os.environ, {"WFS_VALIDATOR_FEATURE_COUNT": "abc"}),
            pytest.raises(ValueError),
        ):
            ValidatorConfig.from_env()


class TestValidatorConfigValidation:
    """Fail-fast range validation."""

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("WFS_VALIDATOR_FEATURE_COUNT", "0"),
            ("WFS_VALIDATOR_FEATURE_COUNT", "-3"),
            ("WFS_VALIDATOR_HTTP_TIMEOUT_S", "0"),
            ("WFS_VALIDATOR_USER_AGENT", ""),
            ("WFS_VALIDATOR_WFS_SCHEMA_LOCATION", ""),
            ("WFS_VALIDATOR_LOG_LEVEL", "chatty"),
        ],
    )
    def test_invalid_value_rejected(self, key: str, value: str) -> None:
        with patch.dict(os.environ, {key: value}), pytest.raises(ConfigValidationError) as info:
            ValidatorConfig.from_env()
        assert info.value.key == key

    def test_error_message_names_key(self) -> None:
        with (
            patch.dict(os.environ, {"WFS_VALIDATOR_FEATURE_COUNT": "0"}),
            pytest.raises(ConfigValidationError, match="WFS_VALIDATOR_FEATURE_COUNT=0"),
        ):
            ValidatorConfig.from_env()


class TestValidatorConfigOverrides:
    """Command line values applied on top of the environment."""

    def test_none_values_are_ignored(self) -> None:
        cfg = ValidatorConfig().with_overrides(feature_count=None, http_timeout_s=None)
        assert cfg == ValidatorConfig()

    def test_overrides_applied(self) -> None:
        cfg = ValidatorConfig().with_overrides(feature_count=3, log_level="WARNING")
        assert cfg.feature_count == 3
        assert cfg.log_level == "WARNING"

    def test_overrides_validated(self) -> None:
        with pytest.raises(ConfigValidationError):
            ValidatorConfig().with_overrides(http_timeout_s=-1.0)
