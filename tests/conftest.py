"""Shared pytest fixtures and test helpers for easel tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from easel.cli import cli
from easel.core.extension import BaseExtension, ExtensionMetadata
from easel.core.runtime import Runtime


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo CLI logging configuration so caplog keeps working across tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    easel_logger = logging.getLogger("easel")
    easel_level = easel_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    easel_logger.setLevel(easel_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def runtime() -> Iterator[Runtime]:
    """A fresh runtime, destroyed after the test."""
    rt = Runtime()
    try:
        yield rt
    finally:
        rt.destroy()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated project directory used as CWD, with no config inherited."""
    monkeypatch.delenv("EASEL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class RecordingExtension(BaseExtension):
    """Extension that records lifecycle calls and contributes fixed data."""

    def __init__(
        self,
        extension_id: str,
        contributions: dict[str, list[Any]] | None = None,
        *,
        on_activate: Callable[[Any], None] | None = None,
    ) -> None:
        self.id = extension_id
        self.metadata = ExtensionMetadata(name=extension_id.title())
        self.calls: list[str] = []
        self._contributions = contributions
        self._on_activate = on_activate

    def activate(self, context: Any) -> None:
        self.calls.append("activate")
        if self._on_activate is not None:
            self._on_activate(context)

    def deactivate(self, context: Any) -> None:
        self.calls.append("deactivate")

    def contribute(self) -> dict[str, list[Any]]:
        self.calls.append("contribute")
        return self._contributions or {}


# ---------------------------------------------------------------------------
# CLI project with one local plugin
# ---------------------------------------------------------------------------

_WIDGETS_PLUGIN_SRC = """\
import pluggy

from easel.core.extension import BaseExtension, ExtensionMetadata

hookimpl = pluggy.HookimplMarker("easel")


def shout(text):
    return text.upper()


def fail():
    raise ValueError("widget jammed")


class Widgets(BaseExtension):
    id = "demo.widgets"
    metadata = ExtensionMetadata(name="Demo Widgets")

    def contribute(self):
        return {
            "contribution.point.contributions": [
                {"id": "widgets", "description": "Dashboard widgets"}
            ],
            "widgets": [{"name": "Clock", "size": 2}],
            "contribution.point.commands": [
                {"command": "demo.shout", "title": "Shout", "handler": shout},
                {"command": "demo.fail", "title": "Fail", "handler": fail},
            ],
            "contribution.point.configurations": [
                {"id": "demo.size", "type": "number", "default": 3}
            ],
        }


class WidgetsPlugin:
    @hookimpl
    def easel_extensions(self):
        return [Widgets()]
"""


@pytest.fixture
def plugin_project(project_root: Path) -> Path:
    """Project root with ``.easel/plugins/widgets.py`` and an easel.toml."""
    plugin_dir = project_root / ".easel" / "plugins"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "widgets.py").write_text(_WIDGETS_PLUGIN_SRC, encoding="utf-8")
    (project_root / "easel.toml").write_text(
        '[plugins]\nentry_points = false\n\n[configuration]\n"editor.theme" = "light"\n',
        encoding="utf-8",
    )
    return project_root


def invoke_json(runner: CliRunner, *args: str) -> tuple[Result, dict[str, Any]]:
    """Invoke the CLI with ``--json`` and parse whichever stream carries the Result."""
    result = runner.invoke(cli, ["--json", *args])
    stream = result.stdout if result.exit_code == 0 else result.stderr
    # Failures share stderr with log records; the Result is the last top-level object.
    lines = stream.splitlines()
    start = max(index for index, line in enumerate(lines) if line == "{")
    return result, json.loads("\n".join(lines[start:]))
