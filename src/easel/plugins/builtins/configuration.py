"""Built-in extension exposing the ConfigurationService as commands.

Lets hosts and the CLI drive configuration through the same command surface
as any other extension (``configuration.get``, ``configuration.update``,
``configuration.export``, ``configuration.import``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pluggy

from easel.core.configuration import CONFIGURATION_SERVICE
from easel.core.contributions.points import ContributionPointIds
from easel.core.extension import BaseExtension, ExtensionMetadata

if TYPE_CHECKING:
    from easel.core.configuration import ConfigurationStore
    from easel.core.context import HostContext

hookimpl = pluggy.HookimplMarker("easel")

logger = logging.getLogger(__name__)


class ConfigurationCommands(BaseExtension):
    """Declares configuration commands; handlers resolve the store lazily."""

    id = "easel.configuration"
    metadata = ExtensionMetadata(name="Configuration Commands")

    def __init__(self) -> None:
        self._store: ConfigurationStore | None = None

    def activate(self, context: HostContext) -> None:
        self._store = context.services.get(CONFIGURATION_SERVICE)
        if self._store is None:
            logger.warning("%s not found for %s", CONFIGURATION_SERVICE, self.id)

    def deactivate(self, context: HostContext) -> None:
        self._store = None

    def contribute(self) -> dict[str, list[dict[str, Any]]]:
        return {
            ContributionPointIds.COMMANDS: [
                {
                    "command": "configuration.get",
                    "title": "Get Configuration Value",
                    "category": "Configuration",
                    "handler": self._get,
                },
                {
                    "command": "configuration.update",
                    "title": "Update Configuration Value",
                    "category": "Configuration",
                    "handler": self._update,
                },
                {
                    "command": "configuration.export",
                    "title": "Export Configuration",
                    "category": "Configuration",
                    "handler": self._export,
                },
                {
                    "command": "configuration.import",
                    "title": "Import Configuration",
                    "category": "Configuration",
                    "handler": self._import,
                },
            ],
        }

    def _require_store(self) -> ConfigurationStore:
        if self._store is None:
            msg = f"{CONFIGURATION_SERVICE} is not available"
            raise RuntimeError(msg)
        return self._store

    def _get(self, key: str, default: Any = None) -> Any:
        return self._require_store().get(key, default)

    def _update(self, key: str, value: Any) -> bool:
        return self._require_store().update(key, value)

    def _export(self) -> dict[str, Any]:
        return self._require_store().export_values()

    def _import(self, data: dict[str, Any]) -> dict[str, Any]:
        store = self._require_store()
        store.import_values(data)
        return store.export_values()


class BuiltinPlugin:
    """Registers the extensions that ship with easel."""

    @hookimpl
    def easel_extensions(self) -> list[BaseExtension]:
        return [ConfigurationCommands()]
