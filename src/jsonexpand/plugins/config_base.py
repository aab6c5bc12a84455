"""Base classes for typed plugin configurations.

This module provides base classes that plugins inherit from to get:
- Strict validation (reject unknown fields)
- Factory methods with clear error messages
- The common stage options shared by every transform

Example usage:
    class JsonExpandConfig(TransformConfig):
        source: str
        target: str | None = None

    cfg = JsonExpandConfig.from_dict(config)
    source = cfg.source  # Direct access, fails fast if missing
"""

from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError, field_validator


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid."""

    pass


class PluginConfig(BaseModel):
    """Base class for typed plugin configurations.

    Provides common validation patterns and helpful error messages.
    All plugin configs should inherit from this class. Instances are
    frozen: configuration never changes after the stage is built.
    """

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Args:
            config: Dictionary of configuration values.

        Returns:
            Validated configuration instance.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e
        except ValueError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e


def _as_list(value: Any) -> Any:
    """Accept a bare string where a list of strings is expected."""
    if isinstance(value, str):
        return [value]
    return value


class TransformConfig(PluginConfig):
    """Options shared by every transform stage.

    Conditional options decide whether a stage sees an event at all:
        type: Only process events whose "type" field equals this value
        tags: Only process events carrying all of these tags
        exclude_tags: Skip events carrying any of these tags

    Success options are applied to every event a stage successfully
    produces (see BaseTransform.filter_matched). Names and values may
    contain %{field} references:
        add_field: Field name -> value (or list of values) to add
        remove_field: Fields to delete
        add_tag: Tags to add
        remove_tag: Tags to remove
    """

    type: str = Field(default="", description="Only process events with this type")
    tags: list[str] = Field(default_factory=list, description="Only process events with all of these tags")
    exclude_tags: list[str] = Field(default_factory=list, description="Skip events with any of these tags")

    add_field: dict[str, str | list[str]] = Field(default_factory=dict)
    remove_field: list[str] = Field(default_factory=list)
    add_tag: list[str] = Field(default_factory=list)
    remove_tag: list[str] = Field(default_factory=list)

    @field_validator("tags", "exclude_tags", "remove_field", "add_tag", "remove_tag", mode="before")
    @classmethod
    def coerce_single_string(cls, v: Any) -> Any:
        return _as_list(v)
