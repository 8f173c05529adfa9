"""Tests for CommandRegistry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from easel.core.commands import CommandRegistry
from easel.core.errors import CommandNotFoundError, NotFoundError
from easel.core.events import EventBus


class TestRegisterCommand:
    @pytest.mark.asyncio
    async def test_execute_returns_handler_result(self) -> None:
        registry = CommandRegistry()
        registry.register_command("math.add", lambda a, b: a + b)

        assert await registry.execute_command("math.add", 2, 3) == 5

    @pytest.mark.asyncio
    async def test_async_handler_is_awaited(self) -> None:
        registry = CommandRegistry()

        async def fetch(value: str) -> str:
            await asyncio.sleep(0)
            return value.upper()

        registry.register_command("text.upper", fetch)

        assert await registry.execute_command("text.upper", "abc") == "ABC"

    @pytest.mark.asyncio
    async def test_overwrite_replaces_and_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = CommandRegistry()
        registry.register_command("x", lambda: 1)
        with caplog.at_level(logging.WARNING, logger="easel.core.commands"):
            registry.register_command("x", lambda: 2)

        assert await registry.execute_command("x") == 2
        assert len(registry.get_commands()) == 1
        assert "already exists" in caplog.text

    @pytest.mark.asyncio
    async def test_bound_context_becomes_first_argument(self) -> None:
        registry = CommandRegistry()

        class Owner:
            prefix = "hi"

        def greet(self: Owner, name: str) -> str:
            return f"{self.prefix} {name}"

        registry.register_command("greet", greet, Owner())

        assert await registry.execute_command("greet", "ada") == "hi ada"

    def test_metadata_is_stored(self) -> None:
        registry = CommandRegistry()
        registry.register_command("x", lambda: None, metadata={"title": "X"})
        command = registry.get_command("x")
        assert command is not None
        assert command.metadata == {"title": "X"}


class TestExecuteCommand:
    @pytest.mark.asyncio
    async def test_unknown_command_raises_not_found(self) -> None:
        registry = CommandRegistry()

        with pytest.raises(CommandNotFoundError) as excinfo:
            await registry.execute_command("missing.cmd")

        assert excinfo.value.item_id == "missing.cmd"
        assert isinstance(excinfo.value, NotFoundError)
        assert "missing.cmd" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_handler_error_propagates_and_is_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        registry = CommandRegistry()

        def explode() -> None:
            raise ValueError("bad input")

        registry.register_command("explode", explode)

        with caplog.at_level(logging.ERROR, logger="easel.core.commands"):
            with pytest.raises(ValueError, match="bad input"):
                await registry.execute_command("explode")

        assert "explode" in caplog.text

    @pytest.mark.asyncio
    async def test_before_and_after_events(self) -> None:
        bus = EventBus()
        seen: list[tuple[Any, ...]] = []
        bus.on("command:before", lambda *a: seen.append(("before", *a)))
        bus.on("command:after", lambda *a: seen.append(("after", *a)))
        registry = CommandRegistry(event_bus=bus)
        registry.register_command("double", lambda n: n * 2)

        await registry.execute_command("double", 4)

        assert seen == [("before", "double", (4,)), ("after", "double", (4,), 8)]

    @pytest.mark.asyncio
    async def test_failing_before_subscriber_is_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        bus = EventBus()

        def reject(*_: Any) -> None:
            raise PermissionError("not allowed")

        bus.on("command:before", reject)
        ran: list[str] = []
        registry = CommandRegistry(event_bus=bus)
        registry.register_command("guarded", lambda: ran.append("ran"))

        with caplog.at_level(logging.ERROR, logger="easel.core.commands"):
            with pytest.raises(PermissionError):
                await registry.execute_command("guarded")

        assert ran == []
        assert "Error executing command 'guarded'" in caplog.text


class TestCommandDisposal:
    def test_dispose_removes_command(self) -> None:
        registry = CommandRegistry()
        handle = registry.register_command("x", lambda: None)
        handle.dispose()
        assert not registry.has_command("x")

    def test_stale_handle_keeps_newer_registration(self) -> None:
        registry = CommandRegistry()
        old = registry.register_command("x", lambda: 1)
        registry.register_command("x", lambda: 2)

        old.dispose()

        assert registry.has_command("x")

    def test_get_commands_is_a_copy(self) -> None:
        registry = CommandRegistry()
        registry.register_command("x", lambda: None)
        registry.get_commands().clear()
        assert registry.has_command("x")

    def test_dispose_clears_registry(self) -> None:
        registry = CommandRegistry()
        registry.register_command("a", lambda: None)
        registry.register_command("b", lambda: None)
        registry.dispose()
        assert registry.get_commands() == {}
