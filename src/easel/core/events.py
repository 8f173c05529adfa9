"""Synchronous, priority-ordered publish/subscribe.

Subscribers for an event run highest priority first; ties keep insertion
order. A handler returning exactly ``False`` stops propagation for that one
emission.

INVARIANT: ``emit`` iterates over a snapshot of the subscriber list, so a
handler may subscribe, unsubscribe or unregister a whole extension while
the emission is in progress.

Exceptions raised by handlers propagate out of the raw bus. Plugin-facing
handles (see :mod:`easel.core.context`) wrap handlers so plugin failures are
logged instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from easel.core.disposable import Disposable

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]


@dataclass(eq=False)
class Subscription:
    """One handler attached to one event name."""

    handler: EventHandler
    priority: int = 0


class EventBus:
    """Priority pub/sub channel owned by a single runtime instance."""

    def __init__(self) -> None:
        self._events: dict[str, list[Subscription]] = {}

    def on(self, event: str, handler: EventHandler, priority: int = 0) -> Disposable:
        """Subscribe *handler* to *event*.

        The same handler may be subscribed more than once; each call creates
        an independent subscription. The returned Disposable removes exactly
        this subscription.
        """
        subscription = Subscription(handler=handler, priority=priority)
        listeners = self._events.setdefault(event, [])
        listeners.append(subscription)
        # list.sort is stable, so equal priorities keep insertion order.
        listeners.sort(key=lambda s: s.priority, reverse=True)
        return Disposable(lambda: self._remove(event, subscription))

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove the first subscription of *handler* on *event*, if any."""
        listeners = self._events.get(event)
        if not listeners:
            return
        for index, subscription in enumerate(listeners):
            if subscription.handler is handler or subscription.handler == handler:
                del listeners[index]
                return

    def emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        """Invoke subscribers of *event* in priority order."""
        listeners = self._events.get(event)
        if not listeners:
            return
        for subscription in tuple(listeners):
            if subscription.handler(*args, **kwargs) is False:
                logger.debug("Propagation of %s stopped by %r", event, subscription.handler)
                break

    def clear(self) -> None:
        """Remove all subscriptions for all events."""
        self._events.clear()

    def count(self, event: str) -> int:
        """Number of live subscriptions for *event*."""
        return len(self._events.get(event, ()))

    def _remove(self, event: str, subscription: Subscription) -> None:
        listeners = self._events.get(event)
        if not listeners:
            return
        for index, candidate in enumerate(listeners):
            if candidate is subscription:
                del listeners[index]
                return
