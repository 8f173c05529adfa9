"""Command: execute a registered command by id."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import click

from easel.commands._base import EaselCommand
from easel.core.errors import CommandNotFoundError
from easel.output.result import Result

if TYPE_CHECKING:
    from easel.commands._context import AppContext


def parse_argument(raw: str) -> Any:
    """Interpret *raw* as JSON when possible, otherwise as a plain string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _jsonable(value: Any) -> Any:
    return json.loads(json.dumps(value, default=repr))


@click.command(
    "exec",
    cls=EaselCommand,
    examples="""\
  easel exec configuration.export
  easel exec configuration.update mirror.enabled true
  easel --json exec configuration.get dieline.width""",
)
@click.argument("command_id")
@click.argument("args", nargs=-1)
@click.pass_obj
def exec_cmd(app: AppContext, command_id: str, args: tuple[str, ...]) -> None:
    """Execute COMMAND_ID with ARGS (each parsed as JSON when valid)."""
    parsed = [parse_argument(arg) for arg in args]
    try:
        value = asyncio.run(app.runtime.execute_command(command_id, *parsed))
    except CommandNotFoundError as exc:
        app.emit(Result.failure("execute_command", "NOT_FOUND", str(exc), command=command_id))
        return
    except Exception as exc:
        app.emit(
            Result.failure(
                "execute_command",
                "COMMAND_FAILED",
                f"{type(exc).__name__}: {exc}",
                command=command_id,
            )
        )
        return
    app.emit(Result.success("execute_command", command=command_id, result=_jsonable(value)))
