"""Merge engine: reconcile evaluated fields with existing frontmatter.

``merge_matter`` is pure with respect to the document tree: it takes the
raw frontmatter content and returns the new content. Placing the result
(and inserting a synthesized node) is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from mdstamp.domain.fields import FieldSpec, update_predicate
from mdstamp.domain.matter import dump_matter, load_matter

logger = logging.getLogger(__name__)


def merge_matter(
    content: str,
    kind: str,
    values: Mapping[str, str],
    specs: Mapping[str, FieldSpec | None],
) -> str:
    """Merge *values* into frontmatter *content* and return the new content.

    Fields are visited in *specs* order; names without an entry in *values*
    are left alone. A field with a ``should_update`` predicate is always
    asked ``should_update(new_value, old_value_or_None)``; the new value is
    written when the predicate approves or when the key was absent. A field
    without a predicate is always written.

    Raises:
        MatterFormatError: If *content* is not a valid mapping for *kind*.
    """
    data = load_matter(content, kind)

    for name, spec in specs.items():
        if name not in values:
            continue
        new_value = values[name]
        predicate = update_predicate(spec)
        if predicate is None:
            data[name] = new_value
            continue

        existed = name in data
        approved = predicate(new_value, data.get(name))
        if approved or not existed:
            data[name] = new_value
        else:
            logger.debug("kept existing value for %r", name)

    return dump_matter(data, kind)
