"""The metadata transformer: stamp computed fields into a document tree.

Usage::

    from mdstamp import CREATED_TIME, LAST_MODIFIED_TIME, metadata

    stamp = metadata(
        git=True,
        metadata={
            "tag": "docs",
            "created": CREATED_TIME,
            "updated": LAST_MODIFIED_TIME,
            "title": {
                "value": lambda ctx: ctx.document.path.stem,
                "should_update": lambda new, old: old == "Example",
            },
        },
    )
    tree = stamp(tree, document)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from mdstamp.domain.fields import FieldSpec, coerce_field_specs
from mdstamp.domain.matter import locate_matter, synthesize_matter
from mdstamp.services.evaluate import evaluate_fields
from mdstamp.services.merge import merge_matter
from mdstamp.services.times import TimeContext

if TYPE_CHECKING:
    from mdstamp.domain.document import Document, Node

    Callback = Callable[[BaseException | None, Node, Document], Any]

logger = logging.getLogger(__name__)


class MetadataTransformer:
    """Callable that merges configured fields into a tree's frontmatter.

    Attributes:
        use_git: Resolve times from git history rather than file stats.
        specs: Normalized field specs, in evaluation order.
    """

    def __init__(self, *, git: bool = True, metadata: Mapping[str, Any] | None = None) -> None:
        self.use_git = git
        self.specs: dict[str, FieldSpec | None] = coerce_field_specs(metadata)

    def __call__(self, tree: Node, document: Document, callback: Callback | None = None) -> Any:
        """Stamp *tree* in place.

        Without *callback* the tree is returned and errors propagate. With
        *callback*, it is called as ``callback(error, tree, document)`` and
        its return value is returned.
        """
        if callback is None:
            self.apply(tree, document)
            return tree
        try:
            self.apply(tree, document)
        except Exception as exc:
            return callback(exc, tree, document)
        return callback(None, tree, document)

    def apply(self, tree: Node, document: Document) -> dict[str, str]:
        """Stamp *tree* in place and return the evaluated field values.

        The frontmatter node is left untouched when evaluation or merging
        fails.
        """
        matter = locate_matter(tree)
        synthesized = matter is None
        if matter is None:
            matter = synthesize_matter()

        context = TimeContext(document, use_git=self.use_git)
        values = evaluate_fields(self.specs, context)
        matter.value = merge_matter(matter.value, matter.type, values, self.specs)

        if synthesized:
            tree.children.insert(0, matter)
        logger.debug("stamped %s fields=%s", document.path, list(values))
        return values


def metadata(*, git: bool = True, metadata: Mapping[str, Any] | None = None) -> MetadataTransformer:
    """Build a :class:`MetadataTransformer`.

    Args:
        git: Use git history for times (default); False uses file stats.
        metadata: Field name -> field spec. Accepts :mod:`mdstamp.domain.fields`
            variants or plain strings, callables and ``{"value", "should_update"}``
            mappings.
    """
    return MetadataTransformer(git=git, metadata=metadata)
