"""Dynamic plugin discovery by package scanning.

Scans plugin packages for classes that:
1. Inherit from BaseTransform
2. Have a non-empty `name` class attribute
3. Are not abstract
"""

import importlib
import inspect
import logging
import pkgutil
from typing import Any

logger = logging.getLogger(__name__)

# Packages (relative to jsonexpand.plugins) scanned for each plugin type.
# Non-recursive: subpackages must be listed explicitly.
PLUGIN_SCAN_CONFIG: dict[str, list[str]] = {
    "transforms": ["transforms"],
}


def discover_plugins_in_package(package_name: str, base_class: type) -> list[type]:
    """Discover plugin classes in the modules of one package.

    Plugin code is part of this distribution: import errors are bugs and
    propagate rather than being skipped.

    Args:
        package_name: Dotted package name, e.g. "jsonexpand.plugins.transforms"
        base_class: Base class that plugins must inherit from

    Returns:
        List of discovered plugin classes, ordered by module name
    """
    package = importlib.import_module(package_name)
    discovered: list[type] = []

    for module_info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if module_info.ispkg or module_info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{package_name}.{module_info.name}")

        for name, obj in inspect.getmembers(module, inspect.isclass):
            # Must be defined in this module (not imported)
            if obj.__module__ != module.__name__:
                continue
            if not issubclass(obj, base_class) or obj is base_class:
                continue
            if inspect.isabstract(obj):
                continue

            plugin_name = getattr(obj, "name", None)
            if not plugin_name:
                logger.warning(
                    "Class %s in %s inherits from %s but has no/empty 'name' attribute - skipping",
                    name,
                    module.__name__,
                    base_class.__name__,
                )
                continue

            discovered.append(obj)

    return discovered


def discover_all_plugins() -> dict[str, list[type]]:
    """Discover all built-in plugins by scanning configured packages.

    Returns:
        Dict mapping plugin type to list of discovered plugin classes:
        {"transforms": [JsonExpand, ...]}

    Raises:
        ValueError: If two plugins of the same type share a name
    """
    from jsonexpand.plugins.base import BaseTransform

    base_classes: dict[str, type] = {"transforms": BaseTransform}
    result: dict[str, list[type]] = {}

    for plugin_type, packages in PLUGIN_SCAN_CONFIG.items():
        all_discovered: list[type] = []
        seen: dict[str, type] = {}

        for package in packages:
            for cls in discover_plugins_in_package(f"jsonexpand.plugins.{package}", base_classes[plugin_type]):
                cls_name: str = cls.name  # type: ignore[attr-defined]
                if cls_name in seen:
                    raise ValueError(
                        f"Duplicate {plugin_type} plugin name '{cls_name}': "
                        f"found in both {seen[cls_name].__module__} and {cls.__module__}. "
                        f"Plugin names must be unique within each type."
                    )
                seen[cls_name] = cls
                all_discovered.append(cls)

        result[plugin_type] = all_discovered

    return result


def get_plugin_description(plugin_cls: type) -> str:
    """First non-empty docstring line of a plugin class, or a default."""
    doc = inspect.getdoc(plugin_cls)
    if doc:
        for line in doc.splitlines():
            if line.strip():
                return line.strip()
    return f"{getattr(plugin_cls, 'name', plugin_cls.__name__)} plugin"


def create_dynamic_hookimpl(
    plugin_classes: list[type],
    hook_method_name: str,
) -> object:
    """Create a pluggy hookimpl object for plugin registration.

    Dynamically generates a class with the appropriate hook method
    decorated with @hookimpl that returns the provided plugin classes.

    Args:
        plugin_classes: List of plugin classes to register
        hook_method_name: Name of the hook method (e.g., "jsonexpand_get_transforms")

    Returns:
        Object instance with the decorated hook method
    """
    from jsonexpand.plugins.hookspecs import hookimpl

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

        pass

    def hook_method(self: Any) -> list[type]:
        return plugin_classes

    setattr(DynamicHookImpl, hook_method_name, hookimpl(hook_method))

    return DynamicHookImpl()
