"""Logging and plugin notifications for registry outcomes."""
from __future__ import annotations

import logging
from typing import Any, Optional

from plugins import PLUGIN_MANAGER, PluginManager

from .results import Error, Severity

LOGGER = logging.getLogger("animlib.registry")

__all__ = ["LOGGER", "RegistryReporter"]


class RegistryReporter:
    """Send registry outcomes to :mod:`logging` and to plugin hooks."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        plugin_manager: Optional[PluginManager] = None,
    ) -> None:
        self.logger = logger or LOGGER
        self.plugin_manager = PLUGIN_MANAGER if plugin_manager is None else plugin_manager

    def registered(self, module: str, capability: str, name: str) -> None:
        self.logger.info("Registered %s %s for module %s", capability, name, module)

    def declined(self, module: str, capability: str, name: str, reason: str) -> None:
        self.logger.debug("Skipped %s %s for module %s: %s", capability, name, module, reason)

    def module_registered(self, module: str, registration: Any) -> None:
        self.logger.info("Module %s registered", module)
        self.plugin_manager.broadcast("on_registry_registered", module, registration)

    def diagnostic(self, error: Error) -> None:
        level = logging.ERROR if error.kind.severity is Severity.ERROR else logging.WARNING
        self.logger.log(level, error.describe())
        self.plugin_manager.broadcast("on_registry_diagnostic", error)

    def unloaded(self) -> None:
        self.logger.debug("Registry unloaded")
        self.plugin_manager.broadcast("on_registry_unloaded")
