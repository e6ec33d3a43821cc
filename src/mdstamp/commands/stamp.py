"""Command: stamp metadata into markdown frontmatter."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mdstamp.domain.fields import (
    CREATED_TIME,
    LAST_MODIFIED_TIME,
    FieldSpec,
    LiteralValue,
    Record,
    UpdatePolicy,
    ValueSpec,
    policy_predicate,
)

if TYPE_CHECKING:
    from mdstamp.commands._context import AppContext


def _parse_assignment(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    name = name.strip()
    if not sep or not name:
        msg = f"expected NAME=VALUE, got {raw!r}"
        raise click.BadParameter(msg, param_hint="--set")
    return name, value


def _cli_fields(
    assignments: tuple[str, ...],
    created_fields: tuple[str, ...],
    modified_fields: tuple[str, ...],
    *,
    keep_existing: bool,
) -> dict[str, FieldSpec]:
    fields: dict[str, ValueSpec] = {}
    for raw in assignments:
        name, value = _parse_assignment(raw)
        fields[name] = LiteralValue(value)
    for name in created_fields:
        fields[name] = CREATED_TIME
    for name in modified_fields:
        fields[name] = LAST_MODIFIED_TIME

    if keep_existing:
        never = policy_predicate(UpdatePolicy.NEVER)
        return {name: Record(value=spec, should_update=never) for name, spec in fields.items()}
    return dict(fields)


EXAMPLES = """\
  mdstamp stamp docs/
  mdstamp stamp README.md --modified updated --created created
  mdstamp stamp docs/ --no-git --modified lastModifiedAt
  mdstamp stamp docs/ --set layout=post --set author=docs-team
  mdstamp stamp docs/ --created date --keep-existing
  mdstamp stamp docs/ -o build/ --modified updated
  mdstamp --json stamp docs/ --dry-run"""


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(EXAMPLES)
    ctx.exit(0)


@click.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--git/--no-git",
    "git",
    default=None,
    help="Resolve times from git history (default) or from file stats.",
)
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="NAME=VALUE",
    help="Stamp a literal value (repeatable).",
)
@click.option(
    "--created",
    "created_fields",
    multiple=True,
    metavar="NAME",
    help="Stamp the created time under NAME (repeatable).",
)
@click.option(
    "--modified",
    "modified_fields",
    multiple=True,
    metavar="NAME",
    help="Stamp the last-modified time under NAME (repeatable).",
)
@click.option(
    "--keep-existing",
    is_flag=True,
    help="Never overwrite existing values of fields given on the command line.",
)
@click.option("--dry-run", is_flag=True, help="Report changes without writing files.")
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write stamped documents here instead of in place.",
)
@click.option(
    "--examples",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_show_examples,
    help="Show usage examples and exit.",
)
@click.pass_obj
def stamp(
    app: AppContext,
    paths: tuple[Path, ...],
    git: bool | None,
    assignments: tuple[str, ...],
    created_fields: tuple[str, ...],
    modified_fields: tuple[str, ...],
    keep_existing: bool,
    dry_run: bool,
    output_dir: Path | None,
) -> None:
    """Stamp metadata into the frontmatter of markdown files."""
    from mdstamp.services.stamp import StampService

    fields = _cli_fields(assignments, created_fields, modified_fields, keep_existing=keep_existing)

    settings = app.settings
    if git is not None:
        settings = settings.model_copy(update={"git": git})

    service = StampService(settings, plugins=app.plugins)
    app.emit(service.stamp(list(paths), fields=fields, dry_run=dry_run, output_dir=output_dir))
