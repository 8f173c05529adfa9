"""Runtime: one explicitly constructed, explicitly owned set of registries.

A host creates a :class:`Runtime`, registers its services, and hands
extensions to :meth:`Runtime.use`. Nothing here is a process-wide
singleton: several runtimes (e.g. one per open document) coexist without
sharing any state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from easel.core.commands import COMMAND_SERVICE, CommandRegistry
from easel.core.configuration import CONFIGURATION_SERVICE, ConfigurationStore
from easel.core.contributions.points import BUILTIN_POINTS
from easel.core.contributions.registry import ContributionRegistry
from easel.core.errors import RuntimeDestroyedError
from easel.core.events import EventBus
from easel.core.extension import ExtensionManager
from easel.core.services import ServiceRegistry, call_hook

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from easel.core.contributions.points import Contribution
    from easel.core.extension import Extension
    from easel.core.services import Service

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Service")


class Runtime:
    """Owns the event bus, services, contributions and extensions.

    Parameters:
        configuration: Initial configuration values, applied before any
            extension contributes defaults.
        extensions: Extensions to register right away, in order.
    """

    def __init__(
        self,
        *,
        configuration: Mapping[str, Any] | None = None,
        extensions: Iterable[Extension] = (),
    ) -> None:
        self.event_bus = EventBus()
        self.services = ServiceRegistry()
        self.contributions = ContributionRegistry(event_bus=self.event_bus)
        self.commands = CommandRegistry(event_bus=self.event_bus)
        self.configuration = ConfigurationStore()
        self.extensions = ExtensionManager(
            event_bus=self.event_bus,
            contributions=self.contributions,
            services=self.services,
        )
        self._destroyed = False

        for point in BUILTIN_POINTS:
            self.contributions.register_point(point)
        self.register_service(COMMAND_SERVICE, self.commands)
        self.register_service(CONFIGURATION_SERVICE, self.configuration)

        if configuration:
            self.configuration.import_values(configuration)
        for extension in extensions:
            self.use(extension)

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def register_service(self, name: str, service: T) -> T:
        """Publish *service* under *name*, calling its ``init()`` if present."""
        self._ensure_alive("register service")
        if self.services.has(name):
            logger.warning("Service %s already registered. It will be replaced.", name)
        call_hook(service, "init")
        self.services.register(name, service)
        self.event_bus.emit("service:register", name, service)
        return service

    def unregister_service(self, name: str) -> bool:
        """Remove a service and call its ``dispose()`` if present."""
        service = self.services.delete(name)
        if service is None:
            logger.warning("Service %s is not registered.", name)
            return False
        try:
            call_hook(service, "dispose")
        except Exception:
            logger.error("Disposing service %s failed", name, exc_info=True)
        self.event_bus.emit("service:unregister", name, service)
        return True

    def get_service(self, name: str) -> Any | None:
        return self.services.get(name)

    # ------------------------------------------------------------------
    # Extensions, contributions, commands
    # ------------------------------------------------------------------

    def use(self, extension: Extension) -> str:
        """Register and activate an extension. Returns its id."""
        self._ensure_alive("register extension")
        return self.extensions.register(extension)

    def unuse(self, extension_id: str) -> bool:
        return self.extensions.unregister(extension_id)

    def get_contributions(self, point_id: str) -> list[Contribution]:
        return self.contributions.get(point_id)

    async def execute_command(self, command_id: str, *args: Any, **kwargs: Any) -> Any:
        self._ensure_alive("execute command")
        return await self.commands.execute_command(command_id, *args, **kwargs)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Tear everything down. Safe to call more than once."""
        if self._destroyed:
            return
        self.event_bus.emit("runtime:destroy")
        self.extensions.destroy()
        for name in reversed(self.services.names()):
            self.unregister_service(name)
        self.commands.dispose()
        self.configuration.dispose()
        self.event_bus.clear()
        self._destroyed = True
        logger.debug("Runtime destroyed")

    def _ensure_alive(self, action: str) -> None:
        if self._destroyed:
            msg = f"Cannot {action}: runtime is destroyed"
            raise RuntimeDestroyedError(msg)
