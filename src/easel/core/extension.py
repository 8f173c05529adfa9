"""Extension protocol and the manager that owns extension lifecycles.

Lifecycle: Unregistered -> Registered & Active -> Unregistered. There is no
suspended state; everything an extension causes is recorded as a
:class:`Disposable` and reversed on ``unregister``.

INVARIANTS:
- The manager, never the extension, owns the disposables created on the
  extension's behalf.
- Plugin-authored code (``contribute``, ``activate``, ``deactivate``) is
  called behind a guard. Failures are logged and never abort a batch
  operation such as :meth:`ExtensionManager.destroy`.
- An extension whose ``activate`` raised is still registered, so it can be
  unregistered cleanly later.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel

from easel.config.logging import extension_log_context
from easel.core.commands import COMMAND_SERVICE
from easel.core.configuration import CONFIGURATION_SERVICE
from easel.core.context import DisposableTracker, HostContext, Tracker
from easel.core.contributions.ids import build_contribution, slugify
from easel.core.contributions.points import ContributionPointIds
from easel.core.errors import HookFailureError

if TYPE_CHECKING:
    from easel.core.commands import CommandRegistry
    from easel.core.configuration import ConfigurationStore
    from easel.core.contributions.registry import ContributionRegistry
    from easel.core.events import EventBus
    from easel.core.services import ServiceRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtensionMetadata:
    name: str


class Extension(Protocol):
    """What the runtime requires of a plugin.

    ``metadata`` and ``contribute()`` are optional; use
    :func:`has_contributions` rather than probing directly.
    """

    id: str

    def activate(self, context: HostContext) -> None: ...

    def deactivate(self, context: HostContext) -> None: ...


class BaseExtension:
    """Convenience base with no-op lifecycle hooks."""

    id: str = ""
    metadata: ExtensionMetadata | None = None

    def activate(self, context: HostContext) -> None:
        pass

    def deactivate(self, context: HostContext) -> None:
        pass


def has_contributions(extension: object) -> bool:
    """Whether *extension* declares contributions via ``contribute()``."""
    return callable(getattr(extension, "contribute", None))


def extension_name(extension: object) -> str:
    metadata = getattr(extension, "metadata", None)
    if isinstance(metadata, Mapping):
        name = metadata.get("name")
    else:
        name = getattr(metadata, "name", None)
    return name or resolve_extension_id(extension)


def resolve_extension_id(extension: object) -> str:
    """The extension's declared id, or one derived from its name or class."""
    explicit = getattr(extension, "id", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    metadata = getattr(extension, "metadata", None)
    name = metadata.get("name") if isinstance(metadata, Mapping) else getattr(metadata, "name", None)
    derived = slugify(name) if isinstance(name, str) else ""
    if not derived:
        derived = slugify(type(extension).__name__)
    logger.warning("Extension without an id; using derived id %r", derived)
    return derived


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


class ExtensionManager:
    """Registers extensions, submits their contributions, and rolls them back."""

    def __init__(
        self,
        *,
        event_bus: EventBus,
        contributions: ContributionRegistry,
        services: ServiceRegistry,
    ) -> None:
        self._event_bus = event_bus
        self._contributions = contributions
        self._services = services
        self._registry: dict[str, Any] = {}
        self._trackers: dict[str, DisposableTracker] = {}
        self._contexts: dict[str, HostContext] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def register(self, extension: Extension) -> str:
        """Register and activate *extension*. Returns the id it is tracked under."""
        extension_id = resolve_extension_id(extension)
        if extension_id in self._registry:
            logger.warning(
                'Extension "%s" already registered. It will be overwritten.', extension_id
            )
            self.unregister(extension_id)

        track = DisposableTracker(extension_id)
        self._trackers[extension_id] = track

        context = HostContext.create(
            extension_id,
            event_bus=self._event_bus,
            contributions=self._contributions,
            services=self._services,
            track=track,
        )
        self._contexts[extension_id] = context

        if has_contributions(extension):
            for point_id, items in self._call_contribute(extension_id, extension).items():
                if not isinstance(items, (list, tuple)):
                    logger.warning(
                        "Extension %r contributed a non-list to %s; skipping",
                        extension_id,
                        point_id,
                    )
                    continue
                for item in items:
                    self.collect_contribution(extension_id, point_id, item, track)

        self._registry[extension_id] = extension
        self._emit("extension:register", extension)

        try:
            with extension_log_context(extension_id, "activate"):
                extension.activate(context)
        except Exception:
            logger.error("%s", HookFailureError(extension_id, "activate"), exc_info=True)

        logger.info('Extension "%s" registered', extension_id)
        return extension_id

    def unregister(self, extension_id: str) -> bool:
        """Deactivate *extension_id* and dispose everything it caused.

        Unknown ids log a warning and return False, so repeated calls are
        harmless. Tracked disposables run in reverse registration order on
        purpose, so later registrations that build on earlier ones are undone
        first. The extension's context is closed afterwards; anything it
        tracks from then on is disposed immediately.
        """
        extension = self._registry.get(extension_id)
        if extension is None:
            logger.warning('Extension "%s" not found.', extension_id)
            return False

        context = self._contexts[extension_id]
        try:
            with extension_log_context(extension_id, "deactivate"):
                extension.deactivate(context)
        except Exception:
            logger.error("%s", HookFailureError(extension_id, "deactivate"), exc_info=True)

        for disposable in reversed(self._trackers.pop(extension_id).close()):
            try:
                disposable.dispose()
            except Exception:
                logger.error(
                    "Disposing a resource of extension %r failed", extension_id, exc_info=True
                )

        del self._registry[extension_id]
        del self._contexts[extension_id]
        self._emit("extension:unregister", extension)
        logger.info('Extension "%s" unregistered', extension_id)
        return True

    def destroy(self) -> None:
        """Unregister every extension, most recently registered first."""
        for extension_id in reversed(list(self._registry)):
            self.unregister(extension_id)

    # ------------------------------------------------------------------
    # Declarative contributions
    # ------------------------------------------------------------------

    def collect_contribution(
        self,
        extension_id: str,
        point_id: str,
        item: Any,
        track: Tracker,
    ) -> None:
        """Translate one declarative item into registrations.

        Every item goes to the Contribution Registry. Accepted items on the
        commands point that carry a callable ``handler`` are also registered
        with the ``CommandService``; accepted items on the configurations
        point seed defaults in the ``ConfigurationService``.
        """
        contribution = build_contribution(point_id, item, extension_id=extension_id)
        track(self._contributions.register(point_id, contribution))
        if self._contributions.get_by_id(contribution.id) is not contribution:
            return

        if point_id == ContributionPointIds.COMMANDS:
            handler = _field(item, "handler")
            if not callable(handler):
                return
            commands: CommandRegistry | None = self._services.get(COMMAND_SERVICE)
            if commands is None:
                logger.warning(
                    "No %s available; command %s is declared but not executable",
                    COMMAND_SERVICE,
                    contribution.id,
                )
                return
            command_id = _field(item, "command") or contribution.id
            track(
                commands.register_command(
                    command_id,
                    handler,
                    metadata={"title": _field(item, "title"), "extension_id": extension_id},
                )
            )
        elif point_id == ContributionPointIds.CONFIGURATIONS:
            configuration: ConfigurationStore | None = self._services.get(CONFIGURATION_SERVICE)
            if configuration is None:
                return
            data = item.model_dump() if isinstance(item, BaseModel) else item
            configuration.initialize_defaults([data])

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get(self, extension_id: str) -> Any | None:
        return self._registry.get(extension_id)

    def has(self, extension_id: str) -> bool:
        return extension_id in self._registry

    def list(self) -> list[Any]:
        return list(self._registry.values())

    def ids(self) -> list[str]:
        return list(self._registry)

    def count(self) -> int:
        return len(self._registry)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _call_contribute(self, extension_id: str, extension: Any) -> Mapping[str, Any]:
        try:
            with extension_log_context(extension_id, "contribute"):
                contributed = extension.contribute()
        except Exception:
            logger.error("%s", HookFailureError(extension_id, "contribute"), exc_info=True)
            return {}
        if contributed is None:
            return {}
        if not isinstance(contributed, Mapping):
            logger.warning(
                "Extension %r returned a non-mapping from contribute(); ignoring", extension_id
            )
            return {}
        return contributed

    def _emit(self, event: str, *args: Any) -> None:
        try:
            self._event_bus.emit(event, *args)
        except Exception:
            logger.error("Handler for %s raised", event, exc_info=True)
