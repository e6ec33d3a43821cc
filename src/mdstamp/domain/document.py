"""Document tree and document handle.

The tree is a minimal mdast-like structure: a ``root`` node whose ordered
children are either frontmatter blocks (``yaml`` / ``toml``) or opaque body
content. mdstamp never looks inside the body.

The :class:`Document` handle carries where a document came from (``path``),
optional routing hints (``data``, e.g. ``destination_path``) and the
diagnostics collected while it was processed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DIAGNOSTIC_SOURCE = "mdstamp"


@dataclass
class Node:
    """A node in the document tree."""

    type: str
    value: str = ""
    children: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


def make_root(*children: Node) -> Node:
    """Build a ``root`` node holding *children* in order."""
    return Node(type="root", children=list(children))


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal message attached to a document."""

    message: str
    source: str = DIAGNOSTIC_SOURCE
    path: Path | None = None


@dataclass
class Document:
    """Handle for a document being processed.

    Attributes:
        path: Filesystem path of the source document.
        data: Free-form routing hints. ``destination_path`` is the only key
            mdstamp itself reads.
        messages: Diagnostics recorded via :meth:`message`.
    """

    path: Path
    data: dict[str, Any] = field(default_factory=dict)
    messages: list[Diagnostic] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def destination_path(self) -> Path | None:
        dest = self.data.get("destination_path")
        return Path(dest) if dest is not None else None

    def message(
        self, reason: str | BaseException, *, source: str = DIAGNOSTIC_SOURCE
    ) -> Diagnostic:
        """Record a non-fatal diagnostic and return it."""
        diagnostic = Diagnostic(message=str(reason), source=source, path=self.path)
        self.messages.append(diagnostic)
        return diagnostic
