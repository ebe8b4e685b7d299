from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional

from .blame_aggregate import add_author_stats
from .models import AuthorStats

Lookup = Callable[[str], Optional[str]]


def normalize_username(username: str | None) -> str:
    u = (username or "").strip().lstrip("@")
    if u == "null":
        return ""
    return u


def representative_commit(st: AuthorStats) -> str | None:
    if not st.commits:
        return None
    return min(st.commits)


def _lookup_one(lookup: Lookup, author: str, commit_id: str) -> tuple[str | None, str]:
    try:
        return normalize_username(lookup(commit_id)) or None, ""
    except Exception as e:
        return None, f"identity lookup failed for {author!r} ({commit_id[:12]}): {e}"


def resolve_identities(
    stats: dict[str, AuthorStats],
    lookup: Lookup,
    *,
    jobs: int = 4,
    cache: dict[str, str | None] | None = None,
    errors: list[str] | None = None,
) -> dict[str, AuthorStats]:
    """
    Rekey `stats` from raw author strings to external usernames.

    `lookup` is called at most once per distinct author (results, including
    misses, are memoized in `cache`) with one representative commit of that
    author. Authors whose lookup yields nothing or fails keep their raw key.
    Entries that collide after rekeying are merged. `stats` is not modified.
    """
    if cache is None:
        cache = {}

    pending: dict[str, str] = {}
    for author, st in stats.items():
        if author in cache:
            continue
        sha = representative_commit(st)
        if sha is None:
            cache[author] = None
            continue
        pending[author] = sha

    if pending:
        with ThreadPoolExecutor(max_workers=max(1, min(int(jobs), len(pending)))) as ex:
            futs = {ex.submit(_lookup_one, lookup, author, sha): author for author, sha in pending.items()}
            for fut in as_completed(futs):
                author = futs[fut]
                username, err = fut.result()
                cache[author] = username
                if err and errors is not None:
                    errors.append(err)

    out: dict[str, AuthorStats] = {}
    for author, st in stats.items():
        key = cache.get(author) or author
        cur = out.get(key)
        if cur is None:
            cur = AuthorStats()
            out[key] = cur
        add_author_stats(cur, st)
    return out
