"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The runtime (with discovered plugins) is built lazily
on first use so ``--help`` and ``--version`` never import plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from easel.output.formatters import format_result

if TYPE_CHECKING:
    from easel.config.settings import EaselSettings
    from easel.core.runtime import Runtime
    from easel.output.result import Result


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: EaselSettings) -> None:
        self.settings = settings
        self._runtime: Runtime | None = None
        self.plugin_names: list[str] = []

        from easel.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def runtime(self) -> Runtime:
        """The runtime instance (created lazily on first access)."""
        if self._runtime is None:
            from easel.core.runtime import Runtime
            from easel.plugins.builtins.configuration import BuiltinPlugin
            from easel.plugins.manager import PluginLoader

            runtime = Runtime(configuration=self.settings.configuration)
            loader = PluginLoader()
            loader.register_plugin(BuiltinPlugin(), name="easel-builtins")
            self.plugin_names = loader.discover(
                local_dir=self.settings.local_plugin_dir,
                entry_points=self.settings.plugins.entry_points,
            )
            loader.load_into(runtime, disabled=self.settings.plugins.disabled)
            self._runtime = runtime
        return self._runtime

    def close(self) -> None:
        if self._runtime is not None:
            self._runtime.destroy()
            self._runtime = None

    def emit(self, result: Result) -> None:
        """Format and output a Result with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr in human mode.
        * Failure: writes to stderr, exits with code 1.
        """
        json_output = self.settings.json_output
        output = format_result(result, json_output=json_output)
        if result.ok:
            click.echo(output)
            if not json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
