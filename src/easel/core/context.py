"""HostContext: the restricted capability set handed to an extension.

Each extension gets its own context. Everything an extension registers
through it (event subscriptions, contributions, commands registered on the
``CommandService`` it looks up, and anything passed to
:meth:`HostContext.track`) is recorded on the extension's behalf, so
unregistering the extension rolls it all back without plugin-side cleanup.

Event handlers subscribed through the context run behind a guard: an
exception raised by plugin code is logged with the extension id and the
emission continues with the next subscriber.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from easel.config.logging import extension_log_context
from easel.core.commands import COMMAND_SERVICE, CommandHandler, CommandRegistry
from easel.core.contributions.ids import build_contribution
from easel.core.disposable import Disposable

if TYPE_CHECKING:
    from easel.core.contributions.points import Contribution, ContributionPoint
    from easel.core.contributions.registry import ContributionRegistry
    from easel.core.events import EventBus, EventHandler
    from easel.core.services import ServiceRegistry

logger = logging.getLogger(__name__)

Tracker = Callable[[Disposable], Disposable]


class ScopedEventBus:
    """``on``/``off``/``emit`` on the runtime bus, owned by one extension."""

    def __init__(self, extension_id: str, bus: EventBus, track: Tracker) -> None:
        self._extension_id = extension_id
        self._bus = bus
        self._track = track
        self._subscriptions: list[tuple[str, EventHandler, Disposable]] = []

    def on(self, event: str, handler: EventHandler, priority: int = 0) -> Disposable:
        extension_id = self._extension_id

        def guarded(*args: Any, **kwargs: Any) -> Any:
            try:
                with extension_log_context(extension_id, event):
                    return handler(*args, **kwargs)
            except Exception:
                logger.error(
                    "Event handler for %r in extension %r failed",
                    event,
                    extension_id,
                    exc_info=True,
                )
                return None

        disposable = self._bus.on(event, guarded, priority)
        entry = (event, handler, disposable)
        self._subscriptions.append(entry)

        def _dispose() -> None:
            disposable.dispose()
            if entry in self._subscriptions:
                self._subscriptions.remove(entry)

        return self._track(Disposable(_dispose))

    def off(self, event: str, handler: EventHandler) -> None:
        for entry in self._subscriptions:
            name, candidate, disposable = entry
            if name == event and (candidate is handler or candidate == handler):
                self._subscriptions.remove(entry)
                disposable.dispose()
                return

    def emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        self._bus.emit(event, *args, **kwargs)


class ScopedContributions:
    """Contribution access whose registrations belong to one extension."""

    def __init__(self, extension_id: str, registry: ContributionRegistry, track: Tracker) -> None:
        self._extension_id = extension_id
        self._registry = registry
        self._track = track

    def get(self, point_id: str) -> list[Contribution]:
        return self._registry.get(point_id)

    def get_point(self, point_id: str) -> ContributionPoint | None:
        return self._registry.get_point(point_id)

    def register(self, point_id: str, item: Any) -> Disposable:
        """Register raw data (or a ready :class:`Contribution`) on *point_id*."""
        contribution = build_contribution(point_id, item, extension_id=self._extension_id)
        return self._track(self._registry.register(point_id, contribution))

    def unregister(self, point_id: str, contribution_id: str) -> bool:
        """Remove one of this extension's own contributions."""
        contribution = self._registry.get_by_id(contribution_id)
        if contribution is None:
            return False
        if contribution.metadata.extension_id != self._extension_id:
            logger.warning(
                "Extension %r cannot unregister contribution %r owned by %r",
                self._extension_id,
                contribution_id,
                contribution.metadata.extension_id,
            )
            return False
        return self._registry.unregister(point_id, contribution_id)


class ScopedCommands:
    """The ``CommandService`` as one extension sees it.

    ``register_command`` hands the returned handle to the extension's
    tracker and tags the command with the owning extension id. Every other
    attribute is read from the underlying :class:`CommandRegistry`.
    """

    def __init__(self, extension_id: str, registry: CommandRegistry, track: Tracker) -> None:
        self._extension_id = extension_id
        self._registry = registry
        self._track = track

    def register_command(
        self,
        command_id: str,
        handler: CommandHandler,
        bound_context: object | None = None,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> Disposable:
        tagged = {"extension_id": self._extension_id, **(metadata or {})}
        return self._track(
            self._registry.register_command(command_id, handler, bound_context, metadata=tagged)
        )

    def __getattr__(self, name: str) -> Any:
        return getattr(self._registry, name)


class ServiceLookup:
    """Read-only view of the service registry.

    The command registry is returned wrapped in :class:`ScopedCommands`, so
    commands registered imperatively are owned by the extension as well.
    """

    def __init__(self, extension_id: str, services: ServiceRegistry, track: Tracker) -> None:
        self._extension_id = extension_id
        self._services = services
        self._track = track
        self._scoped: ScopedCommands | None = None

    def get(self, name: str) -> Any | None:
        service = self._services.get(name)
        if name == COMMAND_SERVICE and isinstance(service, CommandRegistry):
            if self._scoped is None or self._scoped._registry is not service:
                self._scoped = ScopedCommands(self._extension_id, service, self._track)
            return self._scoped
        return service

    def has(self, name: str) -> bool:
        return self._services.has(name)


class DisposableTracker:
    """Collects the disposables one extension owns until it is closed.

    After :meth:`close`, anything tracked is disposed on the spot: an
    unregistered extension can no longer leave registrations behind.
    """

    def __init__(self, extension_id: str) -> None:
        self._extension_id = extension_id
        self._items: list[Disposable] = []
        self.closed = False

    def __call__(self, disposable: Disposable) -> Disposable:
        if self.closed:
            logger.warning(
                "Extension %r is no longer registered; disposing its late registration",
                self._extension_id,
            )
            disposable.dispose()
            return disposable
        self._items.append(disposable)
        return disposable

    def close(self) -> list[Disposable]:
        """Stop accepting disposables and return the ones collected so far."""
        self.closed = True
        items, self._items = self._items, []
        return items


@dataclass(frozen=True)
class HostContext:
    """Immutable bundle of restricted handles for one extension."""

    extension_id: str
    event_bus: ScopedEventBus
    contributions: ScopedContributions
    services: ServiceLookup
    _track: Tracker

    @classmethod
    def create(
        cls,
        extension_id: str,
        *,
        event_bus: EventBus,
        contributions: ContributionRegistry,
        services: ServiceRegistry,
        track: Tracker,
    ) -> HostContext:
        return cls(
            extension_id=extension_id,
            event_bus=ScopedEventBus(extension_id, event_bus, track),
            contributions=ScopedContributions(extension_id, contributions, track),
            services=ServiceLookup(extension_id, services, track),
            _track=track,
        )

    @property
    def closed(self) -> bool:
        """True once the owning extension has been unregistered."""
        return bool(getattr(self._track, "closed", False))

    def track(self, disposable: Disposable) -> Disposable:
        """Hand *disposable* to the runtime; it is disposed on unregister.

        On a closed context the handle is disposed immediately.
        """
        return self._track(disposable)
