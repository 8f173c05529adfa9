"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.easel/plugins/``.
Each discovered plugin supplies services and extensions through the hooks
in :mod:`easel.plugins.hookspecs`; the loader hands them to a Runtime.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

from easel.plugins.hookspecs import EaselHookSpec

if TYPE_CHECKING:
    from easel.core.runtime import Runtime

PROJECT_NAME = "easel"
ENTRY_POINT_GROUP = "easel.plugins"

logger = logging.getLogger(__name__)


class PluginLoader:
    """Discovers plugin modules and feeds their extensions to a runtime."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(EaselHookSpec)
        self._loaded: bool = False

    def discover(self, *, local_dir: Path | None = None, entry_points: bool = True) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of registered plugin names.
        """
        if entry_points:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
            self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    # ------------------------------------------------------------------
    # Runtime wiring
    # ------------------------------------------------------------------

    def load_into(self, runtime: Runtime, *, disabled: Iterable[str] = ()) -> list[str]:
        """Publish plugin services, then register plugin extensions.

        Extensions whose id is in *disabled* are skipped. Returns the ids of
        the extensions that were registered. A failing plugin is logged and
        skipped; it never prevents the others from loading.
        """
        skip = set(disabled)
        for plugin_name, services in self._collect("easel_services", dict):
            for service_name, service in services.items():
                try:
                    runtime.register_service(service_name, service)
                except Exception:
                    logger.warning(
                        "Failed to register service %s from plugin %s",
                        service_name,
                        plugin_name,
                        exc_info=True,
                    )

        registered: list[str] = []
        for plugin_name, extensions in self._collect("easel_extensions", list):
            for extension in extensions:
                extension_id = getattr(extension, "id", None)
                if extension_id in skip:
                    logger.debug("Skipping disabled extension %s", extension_id)
                    continue
                try:
                    registered.append(runtime.use(extension))
                except Exception:
                    logger.warning(
                        "Failed to register extension from plugin %s", plugin_name, exc_info=True
                    )
        return registered

    def _collect(self, hook_name: str, expected: type) -> list[tuple[str, Any]]:
        """Call *hook_name* on each plugin in registration order, isolating failures."""
        collected: list[tuple[str, Any]] = []
        for plugin_name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue
            hook = getattr(plugin, hook_name, None)
            if hook is None:
                continue
            try:
                value = hook()
            except Exception:
                logger.warning("Plugin %s failed in %s", plugin_name, hook_name, exc_info=True)
                continue
            if value is None:
                continue
            if not isinstance(value, expected):
                logger.warning(
                    "Plugin %s returned %s from %s, expected %s",
                    plugin_name,
                    type(value).__name__,
                    hook_name,
                    expected.__name__,
                )
                continue
            collected.append((plugin_name, value))
        return collected

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. A module that implements a hook at module level is
        registered as-is; otherwise classes defined in it that carry
        hookimpl-decorated methods are instantiated and registered.

        Errors are logged as warnings but never raised: a broken local plugin
        must not prevent the rest of the system from starting.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"easel_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            if self._has_hook_impls(module):
                self.register_plugin(module, name=module_name)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue  # skip imported classes
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _has_hook_impls(obj: object) -> bool:
        """Check whether *obj* has any attributes decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("easel")`` sets an ``easel_impl`` attribute
        on decorated functions.
        """
        for name in dir(obj):
            if name.startswith("_"):
                continue
            member = getattr(obj, name, None)
            if callable(member) and getattr(member, "easel_impl", None):
                return True
        return False
