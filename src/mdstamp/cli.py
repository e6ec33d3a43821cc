"""``mdstamp`` entry point: global output/config flags and the command set."""

from __future__ import annotations

from pathlib import Path

import click

from mdstamp import __version__
from mdstamp.commands import register_commands
from mdstamp.commands._context import AppContext
from mdstamp.config.settings import StampSettings


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(__version__, "-V", "--version", prog_name="mdstamp")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Use this config file instead of searching for mdstamp.toml.",
)
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the paths that changed.")
@click.option("-v", "--verbose", is_flag=True, help="List every document and log debug detail.")
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines on stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
) -> None:
    """Stamp git or filesystem timestamps and other metadata into markdown frontmatter."""
    settings = StampSettings.from_cli(
        config_path=str(config_path) if config_path else None,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
