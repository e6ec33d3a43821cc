"""Plugin system: pluggy markers and discovery."""

from __future__ import annotations

import pluggy

from mdstamp.plugins.hookspecs import PROJECT_NAME

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)

__all__ = ["hookimpl"]
