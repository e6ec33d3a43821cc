"""Tests for Rich renderers, quiet output and mode selection."""

from __future__ import annotations

import json

from mdstamp.output.formatters import OutputSettings, format_result
from mdstamp.output.renderers import (
    create_console,
    render_quiet,
    render_result,
    style_for_status,
)
from mdstamp.services.result import ServiceError, ServiceResult


def _stamp_result(ok: bool = True) -> ServiceResult:
    items = [
        {"path": "docs/a.md", "status": "changed", "written": True, "fields": ["updated"]},
        {"path": "docs/b.md", "status": "unchanged", "written": False, "fields": ["updated"]},
    ]
    data = {"items": items, "changed": 1, "unchanged": 1, "failed": 0}
    if ok:
        return ServiceResult(ok=True, op="stamp", data=data, meta={"git": True})
    items.append({"path": "docs/c.md", "status": "failed", "error": "MatterFormatError: bad"})
    data["failed"] = 1
    return ServiceResult(
        ok=False,
        op="stamp",
        data=data,
        error=ServiceError(
            code="STAMP_FAILED",
            message="1 of 3 document(s) failed",
            detail={"docs/c.md": "MatterFormatError: bad"},
        ),
    )


class TestConsole:
    def test_buffered_and_plain(self) -> None:
        console = create_console()
        console.print("[stamp.ok]hello[/]")
        assert console.file.getvalue() == "hello\n"  # type: ignore[attr-defined]

    def test_status_styles(self) -> None:
        assert style_for_status("changed") == "stamp.status.changed"


class TestRenderStamp:
    def test_counts_and_changed_items(self) -> None:
        out = render_result(_stamp_result())
        assert out.startswith("OK")
        assert "changed: 1" in out
        assert "unchanged: 1" in out
        assert "docs/a.md" in out
        assert "docs/b.md" not in out

    def test_verbose_shows_everything(self) -> None:
        out = render_result(_stamp_result(), verbose=True)
        assert "docs/b.md" in out
        assert "meta:" in out

    def test_error(self) -> None:
        out = render_result(_stamp_result(ok=False))
        assert out.startswith("ERROR")
        assert "1 of 3 document(s) failed" in out
        assert "MatterFormatError: bad" in out

    def test_nothing_found(self) -> None:
        empty = {"items": [], "changed": 0, "unchanged": 0, "failed": 0}
        out = render_result(ServiceResult(ok=True, op="stamp", data=empty))
        assert out.startswith("OK")
        assert "changed: 0" in out


class TestQuiet:
    def test_changed_paths_only(self) -> None:
        assert render_quiet(_stamp_result()) == "docs/a.md"

    def test_error(self) -> None:
        assert render_quiet(_stamp_result(ok=False)) == "ERROR: stamp: 1 of 3 document(s) failed"

    def test_nothing_changed(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="stamp", data={"items": []})) == ""


class TestFormatResult:
    def test_json(self) -> None:
        out = format_result(_stamp_result(), settings=OutputSettings(json_output=True))
        assert json.loads(out)["data"]["changed"] == 1

    def test_quiet(self) -> None:
        out = format_result(_stamp_result(), settings=OutputSettings(quiet=True))
        assert out == "docs/a.md"

    def test_default_is_rich(self) -> None:
        assert format_result(_stamp_result()).startswith("OK")
