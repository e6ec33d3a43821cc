"""Shared pytest fixtures and test helpers for mdstamp tests."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest
from click.testing import CliRunner

FIRST_COMMIT_DATE = "2020-10-21T08:00:00+00:00"
SECOND_COMMIT_DATE = "2020-10-22T06:47:56+00:00"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's MDSTAMP_* environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("MDSTAMP_"):
            monkeypatch.delenv(key)


@pytest.fixture
def docs(tmp_path: Path) -> Path:
    """A directory of markdown documents in the shapes mdstamp handles.

    - ``no.md``: no frontmatter.
    - ``existing.md``: YAML frontmatter with a quoted timestamp.
    - ``nested/deep.md``: a document one level down.
    """
    root = tmp_path / "docs"
    (root / "nested").mkdir(parents=True)
    (root / "no.md").write_text("# No frontmatter\n\nBody text.\n")
    (root / "existing.md").write_text(
        "---\nlastModifiedAt: 'Thu, 22 Oct 2020 06:47:56 GMT'\ntitle: Existing\n---\n# Existing\n"
    )
    (root / "nested" / "deep.md").write_text("# Deep\n")
    (root / "notes.txt").write_text("not markdown\n")
    return root


def _git(repo: Path, *args: str, date: str | None = None) -> None:
    env = dict(os.environ)
    if date is not None:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    subprocess.run(["git", *args], cwd=repo, env=env, capture_output=True, check=True)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A git work tree holding ``page.md`` committed twice at fixed dates.

    Also contains ``draft.md``, which is present but never committed.
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.email", "docs@example.com")
    _git(repo, "config", "user.name", "Docs")
    _git(repo, "config", "commit.gpgsign", "false")

    page = repo / "page.md"
    page.write_text("# Page\n")
    _git(repo, "add", "page.md")
    _git(repo, "commit", "-q", "-m", "add page", date=FIRST_COMMIT_DATE)

    page.write_text("# Page\n\nMore.\n")
    _git(repo, "commit", "-q", "-am", "edit page", date=SECOND_COMMIT_DATE)

    (repo / "draft.md").write_text("# Draft\n")
    return repo


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> Path:
    """A freshly initialised work tree with no commits at all."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    repo = tmp_path / "fresh"
    repo.mkdir()
    _git(repo, "init", "-q")
    (repo / "page.md").write_text("# Page\n")
    return repo

