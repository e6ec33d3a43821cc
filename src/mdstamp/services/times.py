"""Time resolution: created / last-modified timestamps for a document.

Two sources are supported:

- git history (default): latest commit for "modified", earliest commit for
  "created". A file with no commits resolves to ``""``.
- filesystem: ``st_mtime`` for "modified", ``st_ctime`` for "created". A
  stat failure is recorded as a diagnostic on the document and resolves to
  ``""``.

When git cannot answer at all (no binary, not a work tree) a diagnostic is
recorded and resolution falls back to the filesystem. Any other git failure
propagates as :class:`~mdstamp.infrastructure.git.GitQueryError`.

All timestamps use one fixed RFC 1123 format in GMT, for example
``Thu, 22 Oct 2020 06:47:56 GMT``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime
from typing import TYPE_CHECKING

from mdstamp.infrastructure import git

if TYPE_CHECKING:
    import os
    from pathlib import Path

    from mdstamp.domain.document import Document

logger = logging.getLogger(__name__)


def format_timestamp(moment: datetime) -> str:
    """Format *moment* as an RFC 1123 GMT string."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return format_datetime(moment.astimezone(UTC), usegmt=True)


def parse_timestamp(text: str) -> datetime:
    """Parse a string produced by :func:`format_timestamp`.

    Raises:
        ValueError: If *text* is empty or not an RFC 1123 date.
    """
    if not text:
        msg = "Cannot parse an empty timestamp"
        raise ValueError(msg)
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid timestamp: {text!r}"
        raise ValueError(msg) from exc


def _stat_time(document: Document, attr: Callable[[os.stat_result], float]) -> str:
    try:
        stats = document.path.stat()
    except OSError as exc:
        logger.debug("stat failed for %s: %s", document.path, exc)
        document.message(exc)
        return ""
    return format_timestamp(datetime.fromtimestamp(attr(stats), tz=UTC))


def _git_time(
    document: Document,
    query: Callable[[Path], datetime | None],
    fallback: Callable[[os.stat_result], float],
) -> str:
    try:
        moment = query(document.path)
    except git.GitUnavailableError as exc:
        logger.debug("falling back to filesystem time: %s", exc)
        document.message(f"{exc}; using filesystem time")
        return _stat_time(document, fallback)
    if moment is None:
        # Not committed yet.
        return ""
    return format_timestamp(moment)


def _mtime(stats: os.stat_result) -> float:
    return stats.st_mtime


def _ctime(stats: os.stat_result) -> float:
    return stats.st_ctime


def resolve_modified_time(document: Document, *, use_git: bool = True) -> str:
    """Return the document's last-modified time, or ``""`` when unknown."""
    if use_git:
        return _git_time(document, git.last_commit_time, _mtime)
    return _stat_time(document, _mtime)


def resolve_created_time(document: Document, *, use_git: bool = True) -> str:
    """Return the document's creation time, or ``""`` when unknown."""
    if use_git:
        return _git_time(document, git.first_commit_time, _ctime)
    return _stat_time(document, _ctime)


class TimeContext:
    """Time values for one document, resolved lazily and at most once.

    Passed to computed fields, which read ``modified_time``,
    ``created_time`` and ``document``.
    """

    def __init__(self, document: Document, *, use_git: bool = True) -> None:
        self.document = document
        self.use_git = use_git
        self._modified: str | None = None
        self._created: str | None = None

    @property
    def modified_time(self) -> str:
        if self._modified is None:
            self._modified = resolve_modified_time(self.document, use_git=self.use_git)
        return self._modified

    @property
    def created_time(self) -> str:
        if self._created is None:
            self._created = resolve_created_time(self.document, use_git=self.use_git)
        return self._created
