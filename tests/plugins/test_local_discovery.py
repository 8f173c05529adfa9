"""Tests for local directory plugin discovery in PluginLoader."""

from __future__ import annotations

from pathlib import Path

from easel.core.runtime import Runtime
from easel.plugins import PluginLoader

# -- Plugin source code used in tests ------------------------------------------

_CLASS_PLUGIN_SRC = """\
import pluggy

from easel.core.extension import BaseExtension

hookimpl = pluggy.HookimplMarker("easel")


class WordCount(BaseExtension):
    id = "local.word-count"

    def contribute(self):
        return {
            "contribution.point.commands": [
                {"command": "words.count", "title": "Count", "handler": lambda text: len(text.split())}
            ]
        }


class LocalPlugin:
    \"\"\"A minimal local plugin for testing.\"\"\"

    @hookimpl
    def easel_extensions(self):
        return [WordCount()]
"""

_MODULE_PLUGIN_SRC = """\
import pluggy

hookimpl = pluggy.HookimplMarker("easel")


@hookimpl
def easel_services():
    return {"Greeting": "hello"}
"""

_SYNTAX_ERROR_SRC = """\
def broken(
    # missing closing paren and colon
"""

_NO_HOOKS_SRC = """\
class PlainClass:
    \"\"\"A class with no hookimpl-decorated methods.\"\"\"
    def hello(self) -> str:
        return "world"
"""


class TestLocalDiscovery:
    """Tests for PluginLoader._discover_local and friends."""

    def test_discovers_class_plugin(self, tmp_path: Path) -> None:
        (tmp_path / "wordcount.py").write_text(_CLASS_PLUGIN_SRC, encoding="utf-8")

        loader = PluginLoader()
        names = loader.discover(local_dir=tmp_path, entry_points=False)

        assert "easel_local_plugin_wordcount.LocalPlugin" in names

    def test_discovers_module_level_hooks(self, tmp_path: Path) -> None:
        (tmp_path / "greeting.py").write_text(_MODULE_PLUGIN_SRC, encoding="utf-8")

        loader = PluginLoader()
        names = loader.discover(local_dir=tmp_path, entry_points=False)

        assert names == ["easel_local_plugin_greeting"]

    def test_local_plugins_load_into_runtime(self, tmp_path: Path, runtime: Runtime) -> None:
        (tmp_path / "wordcount.py").write_text(_CLASS_PLUGIN_SRC, encoding="utf-8")
        (tmp_path / "greeting.py").write_text(_MODULE_PLUGIN_SRC, encoding="utf-8")

        loader = PluginLoader()
        loader.discover(local_dir=tmp_path, entry_points=False)
        ids = loader.load_into(runtime)

        assert ids == ["local.word-count"]
        assert runtime.commands.has_command("words.count")
        assert runtime.get_service("Greeting") == "hello"

    def test_skips_bad_plugin_gracefully(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text(_SYNTAX_ERROR_SRC, encoding="utf-8")

        loader = PluginLoader()
        names = loader.discover(local_dir=tmp_path, entry_points=False)

        assert all("broken" not in n for n in names)

    def test_nonexistent_dir_is_noop(self, tmp_path: Path) -> None:
        loader = PluginLoader()
        names = loader.discover(local_dir=tmp_path / "does_not_exist", entry_points=False)
        assert loader.is_loaded is True
        assert names == []

    def test_skips_underscore_prefixed_files(self, tmp_path: Path) -> None:
        (tmp_path / "_helpers.py").write_text(_CLASS_PLUGIN_SRC, encoding="utf-8")

        loader = PluginLoader()
        names = loader.discover(local_dir=tmp_path, entry_points=False)

        assert all("_helpers" not in n for n in names)

    def test_skips_classes_without_hookimpls(self, tmp_path: Path) -> None:
        (tmp_path / "plain.py").write_text(_NO_HOOKS_SRC, encoding="utf-8")

        loader = PluginLoader()
        names = loader.discover(local_dir=tmp_path, entry_points=False)

        assert all("plain" not in n for n in names)
