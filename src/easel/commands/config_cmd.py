"""Command group: inspect and export ConfigurationService values."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from easel.commands._base import EaselGroup
from easel.output.result import Result

if TYPE_CHECKING:
    from easel.commands._context import AppContext

_CONFIG_EXAMPLES = """\
  easel config show
  easel config get mirror.enabled
  easel config export --output settings.json
  easel config import settings.json"""


@click.group("config", cls=EaselGroup, examples=_CONFIG_EXAMPLES)
def config_group() -> None:
    """Inspect, export and merge configuration values."""


@config_group.command("show")
@click.pass_obj
def show(app: AppContext) -> None:
    """Show every configuration value."""
    values = app.runtime.configuration.export_values()
    items = [{"key": key, "value": value} for key, value in sorted(values.items())]
    app.emit(Result.success("config_show", items=items))


@config_group.command("get")
@click.argument("key")
@click.pass_obj
def get(app: AppContext, key: str) -> None:
    """Print the value of KEY."""
    store = app.runtime.configuration
    if not store.has(key):
        app.emit(Result.failure("config_get", "NOT_FOUND", f"Configuration key {key!r} not set"))
        return
    app.emit(Result.success("config_get", key=key, value=store.get(key)))


@config_group.command("export")
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a flat JSON object to this file instead of stdout.",
)
@click.pass_obj
def export(app: AppContext, output_path: Path | None) -> None:
    """Export configuration as a flat key/value JSON object."""
    store = app.runtime.configuration
    if output_path is None:
        click.echo(json.dumps(store.export_values(), indent=2, sort_keys=True, default=repr))
        return
    store.save(output_path)
    app.emit(
        Result.success("config_export", path=str(output_path), count=len(store.export_values()))
    )


@config_group.command("import")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def import_(app: AppContext, input_path: Path) -> None:
    """Merge a flat JSON object from INPUT_PATH and show the result."""
    store = app.runtime.configuration
    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        app.emit(Result.failure("config_import", "INVALID_JSON", f"{input_path}: {exc}"))
        return
    if not isinstance(data, dict):
        app.emit(
            Result.failure("config_import", "INVALID_JSON", f"{input_path}: expected an object")
        )
        return
    store.import_values(data)
    values = store.export_values()
    items = [{"key": key, "value": value} for key, value in sorted(values.items())]
    app.emit(Result.success("config_import", path=str(input_path), items=items))
