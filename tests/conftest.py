from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

ALICE = ("Alice", "alice@example.com", "2023-01-01T00:00:00+00:00")
BOB = ("Bob", "bob@example.com", "2024-01-01T00:00:00+00:00")


def git(repo: Path, *args: str, author: tuple[str, str, str] | None = None) -> str:
    env = os.environ.copy()
    env["GIT_CONFIG_NOSYSTEM"] = "1"
    env["GIT_CONFIG_GLOBAL"] = os.devnull
    name, email, date = author or ALICE
    env.update(
        {
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_AUTHOR_DATE": date,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
            "GIT_COMMITTER_DATE": date,
        }
    )
    proc = subprocess.run(["git", *args], cwd=str(repo), env=env, capture_output=True, text=True, check=True)
    return proc.stdout


@pytest.fixture()
def git_repo(tmp_path: Path) -> Path:
    """
    Repository with two authors:
      a.py      Alice lines 1 and 3, Bob line 2
      src/b.py  Bob, two lines
    plus an untracked file.
    """
    if shutil.which("git") is None:
        pytest.skip("git is required")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "remote", "add", "origin", "git@github.com:acme/widgets.git")

    (repo / "a.py").write_text("one\ntwo\nthree\n", encoding="utf-8")
    git(repo, "add", "a.py")
    git(repo, "commit", "-q", "-m", "add a", author=ALICE)

    (repo / "a.py").write_text("one\nTWO\nthree\n", encoding="utf-8")
    (repo / "src").mkdir()
    (repo / "src" / "b.py").write_text("x = 1\ny = 2\n", encoding="utf-8")
    git(repo, "add", "a.py", "src/b.py")
    git(repo, "commit", "-q", "-m", "bob edits", author=BOB)

    (repo / "untracked.txt").write_text("nobody\n", encoding="utf-8")
    return repo.resolve()
