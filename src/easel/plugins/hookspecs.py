"""Pluggy hook specifications for distributing extensions as packages.

A distribution advertises a module under the ``easel.plugins`` entry-point
group. That module (or a class in it) implements one or both hooks below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from easel.core.extension import Extension

hookspec = pluggy.HookspecMarker("easel")


class EaselHookSpec:
    """Hook specifications for the easel plugin loader."""

    @hookspec
    def easel_services(self) -> dict[str, Any] | None:
        """Return ``name -> service`` mappings to publish before extensions load."""

    @hookspec
    def easel_extensions(self) -> list[Extension] | None:
        """Return extension instances to register with the runtime."""
