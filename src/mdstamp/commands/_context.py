"""Per-invocation state shared by every command through ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mdstamp.config.logging import configure_logging
from mdstamp.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mdstamp.config.settings import StampSettings
    from mdstamp.plugins.manager import PluginManager
    from mdstamp.services.result import ServiceResult


class AppContext:
    """Settings, the lazily loaded plugin manager, and result output.

    Building the context configures logging. Plugin code is only
    imported when a command first asks for :attr:`plugins`.
    """

    def __init__(self, settings: StampSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugin manager, or None with ``[plugins] enabled = false``."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from mdstamp.plugins.manager import PluginManager

            manager = PluginManager()
            manager.discover_and_load(local_dir=self.settings.plugins_dir)
            self._plugins = manager
        return self._plugins

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result goes to stderr and exits with status 1.

        Outside JSON mode each warning becomes a ``WARNING:`` line on
        stderr so stdout stays pipeable. JSON output already carries them.
        """
        out = self.output_settings
        text = format_result(result, settings=out)
        stream_err = not result.ok
        if text or stream_err:
            click.echo(text, err=stream_err)
        if not out.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        if not result.ok:
            raise SystemExit(1)
