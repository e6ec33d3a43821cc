"""Tests for the document tree and the Document handle."""

from __future__ import annotations

from pathlib import Path

from mdstamp.domain.document import Diagnostic, Document, Node, make_root


class TestNode:
    def test_defaults(self) -> None:
        node = Node(type="yaml")
        assert node.value == ""
        assert node.children == []

    def test_children_not_shared(self) -> None:
        a, b = Node(type="root"), Node(type="root")
        a.children.append(Node(type="yaml"))
        assert b.children == []

    def test_make_root(self) -> None:
        body = Node(type="markdown", value="# Hi\n")
        root = make_root(body)
        assert root.type == "root"
        assert root.children == [body]


class TestDocument:
    def test_path_coerced(self) -> None:
        doc = Document(path="docs/readme.md")  # type: ignore[arg-type]
        assert doc.path == Path("docs/readme.md")
        assert doc.basename == "readme.md"

    def test_destination_path(self) -> None:
        doc = Document(path=Path("a.md"))
        assert doc.destination_path is None
        doc.data["destination_path"] = "out/a.md"
        assert doc.destination_path == Path("out/a.md")

    def test_message_records_diagnostic(self) -> None:
        doc = Document(path=Path("a.md"))
        diagnostic = doc.message(FileNotFoundError("gone"))
        assert diagnostic == Diagnostic(message="gone", source="mdstamp", path=Path("a.md"))
        assert doc.messages == [diagnostic]

    def test_message_custom_source(self) -> None:
        doc = Document(path=Path("a.md"))
        doc.message("odd", source="plugin")
        assert doc.messages[0].source == "plugin"
