"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, easel.toml only contains overrides.
An empty (or missing) easel.toml yields a runtime with entry-point plugins
and the local ``.easel/plugins/`` directory enabled.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    entry_points: bool = True
    local_dir: str = ".easel/plugins"
    disabled: list[str] = Field(default_factory=list)

