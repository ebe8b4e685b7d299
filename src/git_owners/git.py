from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

DEFAULT_BLAME_TIMEOUT_S = 60


class GitError(RuntimeError):
    pass


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    # Decoded by hand: text mode would turn a lone "\r" in file content into a line break.
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        timeout=timeout_s,
    )
    return (
        proc.returncode,
        proc.stdout.decode("utf-8", errors="replace"),
        proc.stderr.decode("utf-8", errors="replace"),
    )


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def get_repo_toplevel(candidate: Path) -> Optional[Path]:
    start = candidate if candidate.is_dir() else candidate.parent
    try:
        code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=start)
    except (OSError, subprocess.SubprocessError):
        return None
    if code != 0 or not out.strip():
        return None
    return Path(out.strip()).resolve()


def is_tracked(path: Path, root: Path) -> bool:
    try:
        code, _, _ = run_git(["ls-files", "--error-unmatch", "--", _relative(path, root)], cwd=root)
    except (OSError, subprocess.SubprocessError):
        return False
    return code == 0


def list_tracked_files(directory: Path, root: Path, timeout_s: int = 300) -> list[Path]:
    try:
        code, out, err = run_git(["ls-files", "-z", "--", _relative(directory, root)], cwd=root, timeout_s=timeout_s)
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git ls-files timed out after {timeout_s}s") from e
    except OSError as e:
        raise GitError(f"failed to run git ls-files: {e}") from e
    if code != 0:
        raise GitError(f"git ls-files exited {code}: {err.strip()[:500]}")
    return [root / p for p in out.split("\0") if p]


def run_blame(path: Path, root: Path, timeout_s: int = DEFAULT_BLAME_TIMEOUT_S) -> str:
    """Return `git blame --line-porcelain` output for `path`; raise GitError on any failure."""
    rel = _relative(path, root)
    try:
        code, out, err = run_git(["blame", "--line-porcelain", "--", rel], cwd=root, timeout_s=timeout_s)
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git blame timed out after {timeout_s}s") from e
    except OSError as e:
        raise GitError(f"failed to run git blame: {e}") from e
    if code != 0:
        raise GitError(f"git blame exited {code}: {err.strip()[:500]}")
    return out


def get_remote_origin(repo: Path) -> str:
    code, out, _ = run_git(["config", "--get", "remote.origin.url"], cwd=repo)
    if code == 0:
        return out.strip()
    return ""


def canonicalize_remote(remote: str) -> str:
    r = (remote or "").strip()
    if not r:
        return ""

    if "://" not in r and ":" in r and "@" in r.split(":", 1)[0]:
        left, path = r.split(":", 1)
        host = left.split("@", 1)[1]
        canon = f"{host}/{path}"
    else:
        parsed = urlparse(r)
        if parsed.scheme and parsed.netloc:
            host = parsed.netloc
            if "@" in host:
                host = host.split("@", 1)[1]
            canon = f"{host}/{parsed.path.lstrip('/')}"
        else:
            canon = r

    canon = canon.rstrip("/")
    if canon.endswith(".git"):
        canon = canon[:-4]
    return canon


def github_repo_from_remote(remote: str, host: str = "github.com") -> tuple[str, str] | None:
    canon = canonicalize_remote(remote)
    if not canon:
        return None
    parts = canon.split("/")
    remote_host = parts[0].lower()
    if ":" in remote_host:
        remote_host = remote_host.split(":", 1)[0]
    if remote_host != host.strip().lower():
        return None
    if len(parts) != 3 or not parts[1] or not parts[2]:
        return None
    return parts[1], parts[2]


def get_github_repo(repo: Path, host: str = "github.com") -> tuple[str, str] | None:
    try:
        remote = get_remote_origin(repo)
    except (OSError, subprocess.SubprocessError):
        return None
    return github_repo_from_remote(remote, host=host)
