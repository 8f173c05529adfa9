"""Rich Console factory and theme for easel output.

Consoles render into a StringIO buffer so formatters keep a
``format_result() -> str`` contract. In non-TTY environments (tests, pipes)
Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

EASEL_THEME = Theme(
    {
        "easel.ok": "bold green",
        "easel.error": "bold red",
        "easel.warning": "bold yellow",
        "easel.op": "bold cyan",
        "easel.id": "bold blue",
        "easel.dim": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=EASEL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
