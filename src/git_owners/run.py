from __future__ import annotations

import argparse
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .blame_aggregate import merge_stats, stats_for_text
from .config import Settings
from .git import GitError, get_github_repo, run_blame
from .github import make_lookup
from .identity import resolve_identities
from .models import AuthorStats
from .render import color_enabled, render_json, render_text
from .report import build_report
from .targets import NotARepositoryError, collect_tracked_files, expand_targets


def _flush_warnings(warnings: list[str]) -> None:
    for w in warnings:
        print(f"Warning: {w}", file=sys.stderr)
    warnings.clear()


def _error(msg: str) -> int:
    print(f"Error: {msg}", file=sys.stderr)
    return 1


def blame_file(path: Path, root: Path, timeout_s: int) -> dict[str, AuthorStats]:
    return stats_for_text(run_blame(path, root, timeout_s=timeout_s))


def collect_blame_stats(
    files: list[Path],
    root: Path,
    *,
    jobs: int,
    timeout_s: int,
    warnings: list[str] | None = None,
) -> dict[str, AuthorStats]:
    """
    Blame `files` on a thread pool and merge the per-file partial stats.
    Files whose blame fails are skipped with a warning.
    """
    stats: dict[str, AuthorStats] = {}
    if not files:
        return stats
    with ThreadPoolExecutor(max_workers=max(1, min(int(jobs), len(files)))) as ex:
        futs = {ex.submit(blame_file, f, root, timeout_s): f for f in files}
        for fut in as_completed(futs):
            f = futs[fut]
            try:
                partial = fut.result()
            except GitError as e:
                if warnings is not None:
                    warnings.append(f"Could not process '{f}': {e}")
                continue
            merge_stats(stats, partial)
    return stats


def run_owners(*, args: argparse.Namespace, settings: Settings) -> int:
    warnings: list[str] = []

    paths = expand_targets(list(args.patterns), warnings=warnings)
    try:
        root, files = collect_tracked_files(paths, warnings=warnings)
    except NotARepositoryError as e:
        _flush_warnings(warnings)
        return _error(str(e))
    _flush_warnings(warnings)

    if root is None or not files:
        return _error("No git-tracked files found")

    stats = collect_blame_stats(files, root, jobs=settings.jobs, timeout_s=settings.blame_timeout_s, warnings=warnings)
    _flush_warnings(warnings)

    if not stats:
        return _error("No blame data found")

    if args.gh:
        gh_repo = get_github_repo(root, host=settings.github_host)
        if gh_repo is None:
            return _error("Could not determine GitHub repository from remote")
        owner, repo = gh_repo
        lookup = make_lookup(
            owner,
            repo,
            backend=settings.github_backend,
            api_url=settings.github_api_url,
            timeout_s=settings.lookup_timeout_s,
            ca_bundle_path=settings.ca_bundle_path,
        )
        stats = resolve_identities(stats, lookup, jobs=settings.lookup_jobs, errors=warnings)
        _flush_warnings(warnings)

    rows = build_report(stats)
    if args.json:
        sys.stdout.write(render_json(rows))
    else:
        color = color_enabled(sys.stdout, enabled=settings.color)
        sys.stdout.write(render_text(rows, verbose=bool(args.verbose), only_name=bool(args.only_name), color=color))
    return 0
