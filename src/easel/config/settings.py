"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  (CLI flags passed by Click)
  2. Env vars     (``EASEL_*`` prefix, ``__`` for nesting)
  3. TOML file    (``easel.toml`` discovered via walk-up)
  4. Code defaults baked into :mod:`easel.config.models`
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from easel.config.discovery import find_config
from easel.config.models import PluginsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``easel.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed from from_cli() to settings_customise_sources().
_tls = threading.local()


class EaselSettings(BaseSettings):
    """Settings for the easel CLI and for hosts that embed a runtime.

    Attributes:
        project_root: Directory relative paths resolve against (parent of
            the config file, or CWD if none was found).
        config_path: The config file in effect, if any.
        configuration: Initial ConfigurationService values.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "EASEL_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    configuration: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @property
    def local_plugin_dir(self) -> Path:
        path = Path(self.plugins.local_dir)
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> EaselSettings:
        """Construct settings from a CLI invocation.

        Discovers the config file via walk-up (or explicit *config_path*) and
        merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            candidate = Path(config_path)
            if candidate.is_file():
                toml_path = candidate
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()
            if toml_path and toml_path.parent.name == ".easel":
                resolved_root = toml_path.parent.parent

        _tls.toml_path = toml_path
        try:
            return cls(project_root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
