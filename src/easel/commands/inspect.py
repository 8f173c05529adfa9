"""Introspection commands: extensions, points, contributions, commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from easel.commands._base import EaselCommand
from easel.core.extension import extension_name
from easel.output.result import Result

if TYPE_CHECKING:
    from easel.commands._context import AppContext
    from easel.core.contributions.points import Contribution


def _describe_data(data: Any) -> Any:
    """Drop callables so contribution data can be shown and serialized."""
    if isinstance(data, dict):
        return {key: _describe_data(value) for key, value in data.items() if not callable(value)}
    if isinstance(data, (list, tuple)):
        return [_describe_data(value) for value in data if not callable(value)]
    if isinstance(data, (str, int, float, bool)) or data is None:
        return data
    return repr(data)


def _contribution_row(contribution: Contribution) -> dict[str, Any]:
    return {
        "id": contribution.id,
        "name": contribution.metadata.name,
        "extension": contribution.metadata.extension_id,
        "persistable": contribution.metadata.persistable,
        "data": _describe_data(contribution.data),
    }


@click.command(
    "extensions",
    cls=EaselCommand,
    examples="""\
  easel extensions
  easel --json extensions""",
)
@click.pass_obj
def list_extensions(app: AppContext) -> None:
    """List registered extensions."""
    runtime = app.runtime
    owned: dict[str, int] = {}
    for point in runtime.contributions.get_points():
        for contribution in runtime.contributions.get(point.id):
            owner = contribution.metadata.extension_id
            if owner:
                owned[owner] = owned.get(owner, 0) + 1
    items = [
        {
            "id": extension_id,
            "name": extension_name(runtime.extensions.get(extension_id)),
            "contributions": owned.get(extension_id, 0),
        }
        for extension_id in runtime.extensions.ids()
    ]
    app.emit(Result.success("list_extensions", items=items, plugins=app.plugin_names))


@click.command("points", cls=EaselCommand)
@click.pass_obj
def list_points(app: AppContext) -> None:
    """List declared contribution points."""
    registry = app.runtime.contributions
    items = [
        {
            "id": point.id,
            "description": point.description,
            "validated": point.validate is not None,
            "contributions": len(registry.get(point.id)),
        }
        for point in registry.get_points()
    ]
    app.emit(Result.success("list_points", items=items))


@click.command(
    "contributions",
    cls=EaselCommand,
    examples="""\
  easel contributions contribution.point.commands
  easel --json contributions contribution.point.configurations""",
)
@click.argument("point_id")
@click.pass_obj
def list_contributions(app: AppContext, point_id: str) -> None:
    """List contributions made against POINT_ID."""
    registry = app.runtime.contributions
    result = Result.success(
        "list_contributions",
        point=point_id,
        items=[_contribution_row(c) for c in registry.get(point_id)],
    )
    if registry.get_point(point_id) is None:
        result = result.model_copy(update={"warnings": [f"Point {point_id!r} is not declared"]})
    app.emit(result)


@click.command("commands", cls=EaselCommand)
@click.pass_obj
def list_commands(app: AppContext) -> None:
    """List executable commands."""
    items = [
        {
            "id": command.id,
            "title": command.metadata.get("title"),
            "extension": command.metadata.get("extension_id"),
        }
        for command in app.runtime.commands.get_commands().values()
    ]
    app.emit(Result.success("list_commands", items=items))
