"""Plugin discovery, registration, and safe hook dispatch."""

from __future__ import annotations

import logging
from typing import Any

import pluggy

from obridge.plugins.hookspecs import ObridgeHookSpec

PROJECT_NAME = "obridge"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ObridgeHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``obridge.plugins`` entry point group.

        Returns a list of registered plugin names.
        """
        try:
            self._pm.load_setuptools_entrypoints("obridge.plugins")
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, **kwargs: Any) -> str | None:
        """Call *hook_name* on every plugin.

        Returns a warning message if a plugin raised, else None. Plugin
        exceptions are logged and never propagate.
        """
        caller = getattr(self._pm.hook, hook_name)
        try:
            caller(**kwargs)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            return f"Plugin hook {hook_name} failed"
        return None
