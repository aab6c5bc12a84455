"""Plugin manager for discovery, registration, and instantiation.

Uses pluggy for hook-based plugin registration.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pluggy

from jsonexpand.plugins.base import BaseTransform
from jsonexpand.plugins.hookspecs import PROJECT_NAME, JsonExpandTransformSpec

if TYPE_CHECKING:
    from jsonexpand.core.config import TransformSettings


@dataclass(frozen=True)
class PluginSpec:
    """Registration record for a plugin, as listed by the CLI."""

    name: str
    version: str
    description: str

    @classmethod
    def from_plugin(cls, plugin_cls: type[BaseTransform]) -> "PluginSpec":
        from jsonexpand.plugins.discovery import get_plugin_description

        return cls(
            name=plugin_cls.name,
            version=plugin_cls.plugin_version,
            description=get_plugin_description(plugin_cls),
        )


class PluginManager:
    """Manages plugin discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        transform = manager.create_transform(TransformSettings(plugin="json_expand", options={...}))
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(JsonExpandTransformSpec)

        # Cache - maps name to plugin class for duplicate detection
        self._transforms: dict[str, type[BaseTransform]] = {}

    def register_builtin_plugins(self) -> None:
        """Discover and register all built-in plugins.

        Call this once at startup to make built-in plugins discoverable.
        """
        from jsonexpand.plugins.discovery import create_dynamic_hookimpl, discover_all_plugins

        discovered = discover_all_plugins()
        self.register(create_dynamic_hookimpl(discovered["transforms"], "jsonexpand_get_transforms"))

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods
        """
        self._pm.register(plugin)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        """Refresh plugin caches from hooks.

        Raises:
            ValueError: If a plugin with the same name is already registered
        """
        new_transforms: dict[str, type[BaseTransform]] = {}

        for transforms in self._pm.hook.jsonexpand_get_transforms():
            for cls in transforms:
                name = cls.name
                if name in new_transforms:
                    raise ValueError(f"Duplicate transform plugin name: '{name}'. Already registered by {new_transforms[name].__name__}")
                new_transforms[name] = cls

        self._transforms = new_transforms

    # === Getters ===

    def get_transforms(self) -> list[type[BaseTransform]]:
        """Get all registered transform plugins."""
        return list(self._transforms.values())

    def get_transform_by_name(self, name: str) -> type[BaseTransform] | None:
        """Get transform plugin by name."""
        return self._transforms.get(name)

    def get_plugin_specs(self) -> list[PluginSpec]:
        """Registration records for every transform, sorted by name."""
        return [PluginSpec.from_plugin(cls) for _, cls in sorted(self._transforms.items())]

    # === Instantiation ===

    def create_transform(self, settings: "TransformSettings") -> BaseTransform:
        """Instantiate a configured transform.

        Args:
            settings: Plugin name and options from pipeline settings

        Returns:
            Constructed transform (not yet registered)

        Raises:
            ValueError: If no transform with that name is registered
            PluginConfigError: If the options are invalid for the plugin
        """
        plugin_cls = self.get_transform_by_name(settings.plugin)
        if plugin_cls is None:
            available = sorted(self._transforms)
            raise ValueError(f"Unknown transform plugin: '{settings.plugin}'. Available transforms: {available}")
        return plugin_cls(dict(settings.options))
