"""Named service lookup.

A service is any object; ``init()`` and ``dispose()`` are optional and are
called by the runtime when present.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar


T = TypeVar("T")


class Service(Protocol):
    """Shape of a service. Both hooks are optional at runtime, see :func:`call_hook`."""

    def init(self) -> None: ...

    def dispose(self) -> None: ...


def call_hook(service: object, hook: str) -> None:
    """Invoke ``service.<hook>()`` if the service defines it."""
    method = getattr(service, hook, None)
    if callable(method):
        method()


class ServiceRegistry:
    """Map of service name to service instance."""

    def __init__(self) -> None:
        self._services: dict[str, Any] = {}

    def register(self, name: str, service: T) -> T:
        self._services[name] = service
        return service

    def get(self, name: str) -> Any | None:
        return self._services.get(name)

    def has(self, name: str) -> bool:
        return name in self._services

    def delete(self, name: str) -> Any | None:
        return self._services.pop(name, None)

    def names(self) -> list[str]:
        return list(self._services)
