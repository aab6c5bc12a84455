"""Built-in transform plugins.

Each transform receives an event and returns the events that continue
downstream. Plugins are accessed via PluginManager, not direct imports:
    manager = PluginManager()
    manager.register_builtin_plugins()
    transform_cls = manager.get_transform_by_name("json_expand")
"""
