"""Keyed configuration values with change notification.

Published to extensions under the well-known service name
``ConfigurationService``. Defaults come from contributions to
``ContributionPointIds.CONFIGURATIONS``; explicit values always win over
defaults. Persistence is a flat ``key -> value`` JSON object.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from easel.core.disposable import Disposable
from easel.core.events import EventBus

logger = logging.getLogger(__name__)

CONFIGURATION_SERVICE = "ConfigurationService"

_MISSING = object()


@dataclass(frozen=True)
class ConfigurationChangeEvent:
    """Payload of ``change`` and ``change:<key>`` notifications."""

    key: str
    value: Any
    old_value: Any


ChangeListener = Callable[[ConfigurationChangeEvent], Any]


class ConfigurationStore:
    """In-memory configuration values owned by one runtime."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        # Private bus: change listeners never see runtime-wide events.
        self._events = EventBus()

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._values

    def update(self, key: str, value: Any) -> bool:
        """Set *key* to *value*. Returns True if the stored value changed."""
        old_value = self._values.get(key, _MISSING)
        if old_value is not _MISSING and old_value == value:
            return False
        self._values[key] = value
        event = ConfigurationChangeEvent(
            key=key,
            value=value,
            old_value=None if old_value is _MISSING else old_value,
        )
        self._events.emit(f"change:{key}", event)
        self._events.emit("change", event)
        return True

    def on_did_change(self, key: str, callback: ChangeListener) -> Disposable:
        """Listen for changes to a single key."""
        return self._events.on(f"change:{key}", callback)

    def on_any_change(self, callback: ChangeListener) -> Disposable:
        """Listen for changes to any key."""
        return self._events.on("change", callback)

    def export_values(self) -> dict[str, Any]:
        """Current state as a plain mapping (suitable for templates)."""
        return dict(self._values)

    def import_values(self, data: Mapping[str, Any]) -> None:
        """Merge *data* into the store, firing change events per key."""
        if not isinstance(data, Mapping):
            logger.warning("Configuration import data must be a mapping, got %s", type(data).__name__)
            return
        for key, value in data.items():
            self.update(key, value)

    def initialize_defaults(self, contributions: Iterable[Mapping[str, Any]]) -> None:
        """Seed defaults from configuration contributions for keys not yet set."""
        for item in contributions:
            key = item.get("id")
            if not key:
                logger.warning(
                    "Configuration contribution missing 'id'. Skipping default initialization: %r",
                    item,
                )
                continue
            if key not in self._values and item.get("default") is not None:
                self._values[key] = item["default"]

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")

    def load(self, path: Path) -> None:
        self.import_values(json.loads(path.read_text(encoding="utf-8")))

    def dispose(self) -> None:
        self._values.clear()
        self._events.clear()
