"""Subcommand modules for easel.

Provides register_commands() which uses deferred imports to keep
``easel --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root group."""
    from easel.commands.config_cmd import config_group
    from easel.commands.exec_cmd import exec_cmd
    from easel.commands.inspect import (
        list_commands,
        list_contributions,
        list_extensions,
        list_points,
    )

    cli.add_command(list_extensions)
    cli.add_command(list_points)
    cli.add_command(list_contributions)
    cli.add_command(list_commands)
    cli.add_command(exec_cmd)
    cli.add_command(config_group)
