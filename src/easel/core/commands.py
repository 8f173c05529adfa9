"""Command registry: named, callable actions.

The registry is published to extensions under the well-known service name
``CommandService``. It is the single place where imperative behavior is
exposed to the outside world (CLI, other extensions, tests).

Absence is fatal to the call here and nowhere else: ``execute_command`` on
an unknown id raises :class:`CommandNotFoundError`.
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from easel.core.disposable import Disposable
from easel.core.errors import CommandNotFoundError

if TYPE_CHECKING:
    from easel.core.events import EventBus

logger = logging.getLogger(__name__)

COMMAND_SERVICE = "CommandService"

CommandHandler = Callable[..., Any]


@dataclass(frozen=True, eq=False)
class Command:
    """A registered command. Identity is the ``id``."""

    id: str
    handler: CommandHandler
    metadata: dict[str, Any] = field(default_factory=dict)


class CommandRegistry:
    """Stores commands by id and executes them on request.

    Parameters:
        event_bus: Optional bus; when given, ``command:before`` and
            ``command:after`` are emitted around every execution.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._commands: dict[str, Command] = {}
        self._event_bus = event_bus

    def register_command(
        self,
        command_id: str,
        handler: CommandHandler,
        bound_context: object | None = None,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> Disposable:
        """Register *handler* under *command_id*, replacing any previous entry.

        If *bound_context* is given, the handler is bound to it as a method
        (it receives the context as its first argument).
        """
        if command_id in self._commands:
            logger.warning("Command %r already exists. It will be overwritten.", command_id)
        if bound_context is not None:
            handler = types.MethodType(handler, bound_context)
        command = Command(id=command_id, handler=handler, metadata=dict(metadata or {}))
        self._commands[command_id] = command
        logger.debug("Registered command: %s", command_id)
        return Disposable(lambda: self._remove(command))

    async def execute_command(self, command_id: str, *args: Any, **kwargs: Any) -> Any:
        """Run a command and return its (awaited) result.

        Raises:
            CommandNotFoundError: No command with *command_id* is registered.
            Exception: Whatever the handler or a ``command:before`` subscriber
                raised, after logging it.
        """
        command = self._commands.get(command_id)
        if command is None:
            logger.warning("Command %r not found", command_id)
            raise CommandNotFoundError(command_id)

        try:
            if self._event_bus is not None:
                self._event_bus.emit("command:before", command_id, args)
            result = command.handler(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.error("Error executing command %r", command_id, exc_info=True)
            raise
        if self._event_bus is not None:
            self._event_bus.emit("command:after", command_id, args, result)
        return result

    def get_commands(self) -> dict[str, Command]:
        """Snapshot of all registered commands keyed by id."""
        return dict(self._commands)

    def get_command(self, command_id: str) -> Command | None:
        return self._commands.get(command_id)

    def has_command(self, command_id: str) -> bool:
        return command_id in self._commands

    def dispose(self) -> None:
        """Drop every command. Used on full runtime teardown only."""
        self._commands.clear()

    def _remove(self, command: Command) -> None:
        # A later registration under the same id owns the slot now.
        if self._commands.get(command.id) is command:
            del self._commands[command.id]
            logger.debug("Unregistered command: %s", command.id)
