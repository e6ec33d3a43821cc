"""Plugin loading and field collection.

Plugins come from two places:

- installed distributions advertising the ``mdstamp.plugins`` entry-point
  group (loaded through pluggy);
- single-file plugins in the project's local plugin directory
  (``.mdstamp/plugins/`` unless configured otherwise).

A plugin is any object with ``@hookimpl``-marked methods. Classes are
instantiated before registration so hooks are called on bound methods.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import Any

import pluggy

from mdstamp.plugins.hookspecs import PROJECT_NAME, MdstampHookSpec

ENTRY_POINT_GROUP = "mdstamp.plugins"
LOCAL_MODULE_PREFIX = "mdstamp_local_plugin_"

logger = logging.getLogger(__name__)


def _is_plugin_class(obj: Any) -> bool:
    """True for classes carrying at least one public mdstamp hookimpl."""
    if not inspect.isclass(obj):
        return False
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(obj, name, None), marker, None) is not None
        for name in dir(obj)
        if not name.startswith("_")
    )


def _import_file(py_file: Path) -> ModuleType | None:
    module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Cannot import local plugin %s", py_file)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Local plugin %s failed to import", py_file, exc_info=True)
        return None
    return module


def _defined_plugin_classes(module: ModuleType) -> Iterator[type]:
    for _name, obj in inspect.getmembers(module, _is_plugin_class):
        if obj.__module__ == module.__name__:
            yield obj


class PluginManager:
    """Loads plugins and merges the fields they contribute."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MdstampHookSpec)

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local ones; return all plugin names."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_registered_classes()
        if local_dir is not None and local_dir.is_dir():
            self._load_local(local_dir)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an already-built plugin object."""
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def list_plugin_names(self) -> list[str]:
        """Plugin names in registration order."""
        return [name for name, _plugin in self._pm.list_name_plugin()]

    @property
    def hook(self) -> pluggy.HookRelay:
        """Hook relay for calling plugin hooks directly."""
        return self._pm.hook

    def collect_fields(self) -> dict[str, Any]:
        """Merge ``register_fields`` results in registration order.

        Later plugins override earlier ones by field name. A plugin whose
        hook raises, or returns something other than a dict, is logged and
        left out.
        """
        fields: dict[str, Any] = {}
        # pluggy keeps plain implementations in registration order
        for impl in self._pm.hook.register_fields.get_hookimpls():
            try:
                contributed = impl.function()
            except Exception:
                logger.warning(
                    "Plugin %s failed in register_fields", impl.plugin_name, exc_info=True
                )
                continue
            if contributed is None:
                continue
            if not isinstance(contributed, dict):
                logger.warning(
                    "Plugin %s returned non-dict fields (%s); ignored",
                    impl.plugin_name,
                    type(contributed).__name__,
                )
                continue
            fields.update(contributed)
        return fields

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_local(self, local_dir: Path) -> None:
        """Import each public ``*.py`` in *local_dir* and register its plugin classes.

        Import or construction failures are logged; the remaining plugins
        still load.
        """
        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module = _import_file(py_file)
            if module is None:
                continue
            for cls in _defined_plugin_classes(module):
                try:
                    instance = cls()
                except Exception:
                    logger.warning("Cannot construct plugin %s from %s", cls.__name__, py_file)
                    continue
                self.register_plugin(instance, name=f"{module.__name__}.{cls.__name__}")

    def _instantiate_registered_classes(self) -> None:
        """Swap entry points that registered a bare class for an instance of it."""
        for plugin in list(self._pm.get_plugins()):
            if not _is_plugin_class(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Cannot construct entry-point plugin %s", plugin_name)
                continue
            self._pm.register(instance, name=plugin_name)
