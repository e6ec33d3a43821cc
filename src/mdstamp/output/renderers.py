"""Rich rendering of ServiceResult.

Renderers draw into a Console backed by a StringIO buffer and hand back the
text, so callers decide where it goes. Rich drops colour codes on its own
when the buffer is not a terminal, which keeps piped and test output plain.

Successful results get the stamp summary; failures get the error layout.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

if TYPE_CHECKING:
    from mdstamp.services.result import ServiceResult

MDSTAMP_THEME = Theme(
    {
        "stamp.ok": "bold green",
        "stamp.error": "bold red",
        "stamp.op": "bold cyan",
        "stamp.key": "dim",
        "stamp.path": "bold blue",
        "stamp.status.changed": "green",
        "stamp.status.unchanged": "dim",
        "stamp.status.failed": "red",
    }
)


def create_console(*, width: int = 120) -> Console:
    """Console writing into a fresh StringIO buffer."""
    return Console(file=StringIO(), theme=MDSTAMP_THEME, highlight=False, width=width)


def _buffered_text(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    return f"stamp.status.{status}"


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Human-readable text for *result*; failures get the error layout."""
    console = create_console()
    draw = _render_stamp if result.ok else _render_error
    draw(result, console, verbose=verbose)
    return _buffered_text(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: changed paths only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items") or []
    return "\n".join(i["path"] for i in items if i.get("status") == "changed")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "stamp.ok"), (f"  {result.op}", "stamp.op")))


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text.assemble((f"  {key}: ", "stamp.key"), str(value)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}", markup=False)


def _items_table(items: list[dict[str, Any]], *, verbose: bool) -> Table:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("status")
    table.add_column("path", style="stamp.path")
    table.add_column("fields")
    if verbose:
        table.add_column("destination")
    for item in items:
        status = item.get("status", "")
        detail = item.get("error") or ", ".join(item.get("fields", []))
        row = [
            Text(status, style=style_for_status(status)),
            Text(item.get("path", "")),
            Text(detail),
        ]
        if verbose:
            row.append(Text(item.get("destination", "")))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text.assemble(("ERROR", "stamp.error"), (f"  {result.op}", "stamp.op"))
    console.print(Text.assemble(label, f": {msg}"))

    items = result.data.get("items")
    if items:
        console.print(_items_table(items, verbose=verbose))
    elif err and err.detail:
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Stamp renderer ────────────────────────────────────────────────────


def _render_stamp(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("changed", "unchanged", "failed"):
        if key in result.data:
            _field(console, key, result.data[key])
    items = result.data.get("items") or []
    shown = items if verbose else [i for i in items if i.get("status") != "unchanged"]
    if shown:
        console.print(_items_table(shown, verbose=verbose))
    if verbose:
        _render_meta(console, result)
