"""Rich/JSON rendering of CLI results.

Human mode renders ``data["items"]`` (a list of flat dicts) as a table and
any other data as key/value lines. ``--json`` dumps the Result verbatim.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from easel.output.console import create_console, get_output

if TYPE_CHECKING:
    from easel.output.result import Result


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return escape(json.dumps(value, separators=(",", ":"), default=str))
    return escape(str(value))


def _items_table(title: str, items: list[dict[str, Any]]) -> Table:
    table = Table(title=title, title_style="easel.op", show_lines=False)
    columns = list(dict.fromkeys(key for item in items for key in item))
    for index, column in enumerate(columns):
        table.add_column(column, style="easel.id" if index == 0 else None)
    for item in items:
        table.add_row(*(_cell(item.get(column)) for column in columns))
    return table


def format_result(result: Result, *, json_output: bool = False, no_color: bool = False) -> str:
    """Format a Result for display."""
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console(no_color=no_color)
    if not result.ok:
        message = escape(result.error.message) if result.error else "Unknown error"
        console.print(f"[easel.error]ERROR[/]: {result.op}: {message}")
        return get_output(console).rstrip("\n")

    data = dict(result.data)
    items = data.pop("items", None)
    if isinstance(items, list):
        if items:
            console.print(_items_table(result.op, items))
        else:
            console.print(f"[easel.ok]OK[/]: {result.op} (no items)")
    else:
        console.print(f"[easel.ok]OK[/]: {result.op}")
    for key, value in data.items():
        console.print(f"  [easel.dim]{key}[/]: {_cell(value)}")
    return get_output(console).rstrip("\n")
