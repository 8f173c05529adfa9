"""Extension discovery layer: plugin packaging via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins in a local directory.
INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from easel.plugins.manager import PluginLoader

hookimpl = pluggy.HookimplMarker("easel")

__all__ = ["PluginLoader", "hookimpl"]
