from __future__ import annotations

import glob
import os
from pathlib import Path

from .git import GitError, get_repo_toplevel, is_tracked, list_tracked_files


def expand_pattern(pattern: str) -> list[Path]:
    pattern = os.path.expanduser(pattern)
    literal = Path(pattern)
    if literal.exists():
        return [literal.resolve()]
    return [Path(p).resolve() for p in sorted(glob.glob(pattern, recursive=True))]


def expand_targets(patterns: list[str], warnings: list[str] | None = None) -> list[Path]:
    seen: set[Path] = set()
    out: list[Path] = []
    for pattern in patterns:
        expanded = expand_pattern(pattern)
        if not expanded:
            if warnings is not None:
                warnings.append(f"No files matched '{pattern}'")
            continue
        for p in expanded:
            if p not in seen:
                seen.add(p)
                out.append(p)
    return out


class NotARepositoryError(RuntimeError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' is not in a git repository")
        self.path = path


def collect_tracked_files(paths: list[Path], warnings: list[str] | None = None) -> tuple[Path | None, list[Path]]:
    """
    Map expanded paths to git-tracked files. The repository root is taken from
    the first path; directories expand to the files git tracks under them.
    """
    if not paths:
        return None, []
    root = get_repo_toplevel(paths[0])
    if root is None:
        raise NotARepositoryError(paths[0])

    files: set[Path] = set()
    for p in paths:
        if p.is_dir():
            try:
                files.update(list_tracked_files(p, root))
            except GitError as e:
                if warnings is not None:
                    warnings.append(f"Could not list files in '{p}': {e}")
        elif is_tracked(p, root):
            files.add(p)
    return root, sorted(files)
