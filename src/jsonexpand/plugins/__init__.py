"""Plugin system: transform base class, configuration models and registry.

Transforms are looked up through PluginManager rather than imported directly:
    manager = PluginManager()
    manager.register_builtin_plugins()
    transform_cls = manager.get_transform_by_name("json_expand")
"""

from jsonexpand.plugins.base import BaseTransform
from jsonexpand.plugins.config_base import PluginConfig, PluginConfigError, TransformConfig
from jsonexpand.plugins.hookspecs import hookimpl
from jsonexpand.plugins.manager import PluginManager, PluginSpec

__all__ = [
    "BaseTransform",
    "PluginConfig",
    "PluginConfigError",
    "PluginManager",
    "PluginSpec",
    "TransformConfig",
    "hookimpl",
]
