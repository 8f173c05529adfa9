"""Config file discovery.

Looks for ``easel.toml`` (or ``.easel/config.toml``) in the start directory
and its ancestors. ``EASEL_CONFIG`` pins an explicit file and disables the
walk-up entirely.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAMES = ("easel.toml", ".easel/config.toml")
CONFIG_ENV_VAR = "EASEL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest config file above *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        return pinned if pinned.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate
    return None
