"""Frontmatter nodes: locating, synthesizing, loading and dumping.

Frontmatter is a root-level construct, so lookup is shallow: only direct
children of the root are examined and the first one whose type is a
recognized matter kind wins.

YAML content goes through ruamel.yaml in round-trip mode so that existing
quoting, comments and key order survive a merge. TOML content is read with
:mod:`tomllib` and written with ``tomli_w``.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, MutableMapping
from io import StringIO
from typing import Any

import tomli_w
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from mdstamp.domain.document import Node

YAML_KIND = "yaml"
TOML_KIND = "toml"

# First entry is the kind used for synthesized nodes.
MATTER_KINDS: tuple[str, ...] = (YAML_KIND, TOML_KIND)

# Fence line opening and closing each kind of block.
MATTER_FENCES: dict[str, str] = {
    YAML_KIND: "---",
    TOML_KIND: "+++",
}


class MatterFormatError(ValueError):
    """Existing frontmatter content could not be read as a mapping."""


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful and a failed dump can leave it
    broken, so every call gets its own instance.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    y.width = 4096
    return y


# ---------------------------------------------------------------------------
# Locate / synthesize
# ---------------------------------------------------------------------------


def is_matter(node: Node) -> bool:
    return node.type in MATTER_KINDS


def locate_matter(tree: Node) -> Node | None:
    """Return the first direct child of *tree* that is a frontmatter node."""
    for child in tree.children:
        if is_matter(child):
            return child
    return None


def synthesize_matter() -> Node:
    """Return a new, empty frontmatter node of the primary kind."""
    return Node(type=MATTER_KINDS[0], value="")


# ---------------------------------------------------------------------------
# Load / dump
# ---------------------------------------------------------------------------


def load_matter(content: str, kind: str = YAML_KIND) -> MutableMapping[str, Any]:
    """Parse frontmatter *content* of the given *kind* into a mapping.

    Empty content yields an empty mapping.

    Raises:
        MatterFormatError: If the content is malformed or is not a mapping.
        ValueError: If *kind* is not a recognized matter kind.
    """
    if kind == YAML_KIND:
        if not content.strip():
            return CommentedMap()
        try:
            data = _new_yaml().load(content)
        except YAMLError as exc:
            msg = f"Invalid YAML frontmatter: {exc}"
            raise MatterFormatError(msg) from exc
        if data is None:
            return CommentedMap()
        if not isinstance(data, Mapping):
            msg = f"YAML frontmatter must be a mapping, got {type(data).__name__}"
            raise MatterFormatError(msg)
        return data

    if kind == TOML_KIND:
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML frontmatter: {exc}"
            raise MatterFormatError(msg) from exc

    msg = f"Unknown frontmatter kind: {kind!r}"
    raise ValueError(msg)


def dump_matter(data: Mapping[str, Any], kind: str = YAML_KIND) -> str:
    """Serialize *data* for the given *kind*, trailing whitespace stripped.

    An empty YAML mapping renders as ``{}``; an empty TOML table as ``""``.
    """
    if kind == YAML_KIND:
        buf = StringIO()
        _new_yaml().dump(data, buf)
        return buf.getvalue().rstrip()

    if kind == TOML_KIND:
        return tomli_w.dumps(dict(data)).rstrip()

    msg = f"Unknown frontmatter kind: {kind!r}"
    raise ValueError(msg)
