"""Pluggy hook specifications for mdstamp.

Plugins contribute fields that cannot be written in TOML, most often
computed fields::

    import mdstamp.plugins

    class ReadingTime:
        @mdstamp.plugins.hookimpl
        def register_fields(self):
            return {"words": lambda ctx: len(ctx.document.path.read_text().split())}
"""

from __future__ import annotations

from typing import Any

import pluggy

PROJECT_NAME = "mdstamp"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)


class MdstampHookSpec:
    """Hook specifications for the mdstamp plugin system."""

    @hookspec
    def register_fields(self) -> dict[str, Any] | None:
        """Return field name -> field spec mappings to stamp.

        Values take any shape :func:`mdstamp.domain.fields.coerce_field_spec`
        accepts.
        """
