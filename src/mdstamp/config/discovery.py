"""Locate mdstamp.toml for a documentation tree.

Resolution order: the ``MDSTAMP_CONFIG`` environment variable, then the
nearest ``mdstamp.toml`` walking up from the start directory. The walk stops
at the root of the enclosing git work tree, so a config file sitting above a
repository never applies to it.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "mdstamp.toml"
CONFIG_ENV_VAR = "MDSTAMP_CONFIG"


def _candidates(start: Path) -> Iterator[Path]:
    for directory in (start, *start.parents):
        yield directory / CONFIG_FILENAME
        if (directory / ".git").exists():
            return


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), or None.

    A set ``MDSTAMP_CONFIG`` wins outright; if it names a missing file no
    config applies.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    base = (start or Path.cwd()).resolve()
    return next((c for c in _candidates(base) if c.is_file()), None)
