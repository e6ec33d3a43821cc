"""Document file I/O: splitting text into a tree and rendering it back.

Only frontmatter fences are recognized. A document that starts with a
``---`` (YAML) or ``+++`` (TOML) line and has a matching closing fence
becomes ``root(matter, body)``; anything else is a single body node. The
body is kept verbatim; rendering always terminates the closing fence with a
newline.

The tree holds ``\n`` line endings. A document whose first line ends in
``\r\n`` is marked on the root (``data["newline"]``) and rendered back with
``\r\n`` throughout.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from mdstamp.domain.document import Document, Node, make_root
from mdstamp.domain.matter import MATTER_FENCES, is_matter

BODY_KIND = "markdown"

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})

# Directories to skip when discovering documents.
_SKIP_DIRS = frozenset({".git", ".mdstamp", "node_modules"})


# ---------------------------------------------------------------------------
# Parse / render
# ---------------------------------------------------------------------------


def parse_document(content: str) -> Node:
    """Split *content* into a root node with optional frontmatter + body."""
    tree = _split(content.replace("\r\n", "\n"))
    if _newline_of(content) != "\n":
        tree.data["newline"] = "\r\n"
    return tree


def _newline_of(content: str) -> str:
    first = content.find("\n")
    return "\r\n" if first > 0 and content[first - 1] == "\r" else "\n"


def _split(normalized: str) -> Node:
    lines = normalized.split("\n")
    kind: str | None = None
    for matter_kind, fence in MATTER_FENCES.items():
        if lines[0].rstrip() == fence:
            kind = matter_kind
            break

    if kind is None:
        return make_root(Node(type=BODY_KIND, value=normalized))

    fence = MATTER_FENCES[kind]
    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.rstrip() == fence:
            end_idx = i
            break

    if end_idx is None:
        return make_root(Node(type=BODY_KIND, value=normalized))

    matter = Node(type=kind, value="\n".join(lines[1:end_idx]))
    body = "\n".join(lines[end_idx + 1 :])
    children = [matter]
    if body:
        children.append(Node(type=BODY_KIND, value=body))
    return make_root(*children)


def render_document(tree: Node) -> str:
    """Render a root node back to text."""
    parts: list[str] = []
    for child in tree.children:
        if is_matter(child):
            fence = MATTER_FENCES[child.type]
            block = f"{child.value}\n" if child.value else ""
            parts.append(f"{fence}\n{block}{fence}\n")
        else:
            parts.append(child.value)
    text = "".join(parts)
    newline = tree.data.get("newline", "\n")
    return text.replace("\n", newline) if newline != "\n" else text


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_document(path: Path) -> tuple[Node, Document]:
    """Read *path* into ``(tree, document_handle)``."""
    with path.open(encoding="utf-8", newline="") as fh:
        content = fh.read()
    return parse_document(content), Document(path=path)


def write_document(path: Path, tree: Node) -> None:
    """Render *tree* to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(render_document(tree))


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_markdown_files(paths: Iterable[Path]) -> list[Path]:
    """Expand *paths* into markdown files.

    Files are returned as given (whatever their suffix); directories are
    walked recursively for ``.md`` / ``.markdown`` files, skipping
    ``.git/``, ``.mdstamp/`` and ``node_modules/``. Order is stable and
    duplicates are dropped.
    """
    results: list[Path] = []
    seen: set[Path] = set()
    for root in paths:
        if root.is_dir():
            found = sorted(
                p
                for p in root.rglob("*")
                if p.is_file()
                and p.suffix.lower() in MARKDOWN_SUFFIXES
                and not any(part in _SKIP_DIRS for part in p.relative_to(root).parts)
            )
        else:
            found = [root]
        for path in found:
            key = path.resolve()
            if key not in seen:
                seen.add(key)
                results.append(path)
    return results
