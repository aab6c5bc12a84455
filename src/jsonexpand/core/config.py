"""
Configuration schema and loading for jsonexpand pipelines.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Example settings.yaml:

    transforms:
      - plugin: json_expand
        options:
          source: message
          target: doc
    logging:
      level: INFO
      json_output: false
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "JSONEXPAND"


class TransformSettings(BaseModel):
    """One stage of the pipeline: plugin name plus its options.

    Options are validated by the plugin's own config model when the
    transform is instantiated, not here.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    plugin: str = Field(description="Plugin name (e.g. json_expand)")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Plugin-specific configuration options",
    )

    @field_validator("plugin")
    @classmethod
    def validate_plugin_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("plugin name cannot be empty")
        return v.strip()


class LoggingSettings(BaseModel):
    """Log output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class PipelineSettings(BaseModel):
    """Top-level pipeline configuration.

    This is the single source of truth for a run. All settings are
    validated and frozen after construction.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    transforms: list[TransformSettings] = Field(
        description="Ordered list of transforms applied to every event",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log output configuration",
    )

    @field_validator("transforms")
    @classmethod
    def validate_transforms_not_empty(cls, v: list[TransformSettings]) -> list[TransformSettings]:
        """At least one transform is required."""
        if not v:
            raise ValueError("At least one transform is required")
        return v


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            # Unset with no default - leave as-is so validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        if isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_expand_value(item) for item in value]
        return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    """Lowercase top-level section keys coming from Dynaconf.

    Only section and settings-model keys are normalised; plugin option
    dicts below `options` keep their case.
    """
    if isinstance(value, dict):
        return {str(k).lower(): v for k, v in value.items()}
    return value


def load_settings(config_path: Path) -> PipelineSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (JSONEXPAND_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: JSONEXPAND_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated PipelineSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENV_PREFIX,
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; filter out its internal settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    if "logging" in raw_config:
        raw_config["logging"] = _lower_keys(raw_config["logging"])
    if isinstance(raw_config.get("transforms"), list):
        raw_config["transforms"] = [_lower_keys(item) for item in raw_config["transforms"]]

    raw_config = _expand_env_vars(raw_config)

    return PipelineSettings(**raw_config)
