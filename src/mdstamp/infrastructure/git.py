"""Git history queries for a single file.

Two queries are issued against a document path:

- the author date of the most recent commit touching it;
- the author dates of every commit touching it, oldest first.

Both run ``git`` in the file's directory so documents from any work tree
resolve against their own repository. An uncommitted file simply has no
history; that is reported as ``None`` / an empty list, not as an error.

Failures are split in two:

- :class:`GitUnavailableError` - no git binary, or the path is not inside a
  work tree. Callers may fall back to another time source.
- :class:`GitQueryError` - git ran but failed for any other reason.
"""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# Strict ISO 8601 author date.
_DATE_FORMAT = "--format=%aI"

_NOT_A_REPO_MARKERS = ("not a git repository", "not a work tree")
_NO_COMMITS_MARKER = "does not have any commits yet"


class GitUnavailableError(RuntimeError):
    """Git cannot answer for this path at all."""


class GitQueryError(RuntimeError):
    """A git history query failed."""


def _run_git(path: Path, *args: str) -> str:
    """Run ``git <args> -- <name>`` next to *path* and return stdout."""
    cmd = ["git", *args, "--", path.name]
    try:
        result = subprocess.run(
            cmd,
            cwd=path.parent,
            capture_output=True,
            text=True,
            check=True,
        )
    except OSError as exc:
        msg = f"git unavailable for {path}: {exc}"
        raise GitUnavailableError(msg) from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        if _NO_COMMITS_MARKER in stderr:
            return ""
        if any(marker in stderr.lower() for marker in _NOT_A_REPO_MARKERS):
            msg = f"{path} is not inside a git work tree"
            raise GitUnavailableError(msg) from exc
        msg = f"git {' '.join(args)} failed for {path}: {stderr or exc}"
        raise GitQueryError(msg) from exc
    logger.debug("git %s -- %s", " ".join(args), path)
    return result.stdout


def _parse_dates(output: str) -> list[datetime]:
    return [datetime.fromisoformat(line.strip()) for line in output.splitlines() if line.strip()]


def last_commit_time(path: Path) -> datetime | None:
    """Author date of the latest commit touching *path*, or None."""
    dates = _parse_dates(_run_git(path, "log", "-1", _DATE_FORMAT))
    return dates[0] if dates else None


def commit_times(path: Path) -> list[datetime]:
    """Author dates of all commits touching *path*, oldest first."""
    return _parse_dates(_run_git(path, "log", "--reverse", _DATE_FORMAT))


def first_commit_time(path: Path) -> datetime | None:
    """Author date of the earliest commit touching *path*, or None."""
    dates = commit_times(path)
    return dates[0] if dates else None
