from __future__ import annotations

from typing import Iterable

from .blame_parse import parse_blame
from .models import AttributionEvent, AuthorStats


def fold_events(events: Iterable[AttributionEvent], into: dict[str, AuthorStats]) -> dict[str, AuthorStats]:
    for ev in events:
        st = into.get(ev.author)
        if st is None:
            st = AuthorStats()
            into[ev.author] = st
        st.lines += 1
        if ev.author_time > st.last_commit_time:
            st.last_commit_time = ev.author_time
        if ev.commit_id:
            st.commits.add(ev.commit_id)
    return into


def add_author_stats(dst: AuthorStats, src: AuthorStats) -> None:
    dst.lines += src.lines
    if src.last_commit_time > dst.last_commit_time:
        dst.last_commit_time = src.last_commit_time
    dst.commits |= src.commits


def merge_stats(dst: dict[str, AuthorStats], src: dict[str, AuthorStats]) -> dict[str, AuthorStats]:
    for author, st in src.items():
        cur = dst.get(author)
        if cur is None:
            cur = AuthorStats()
            dst[author] = cur
        add_author_stats(cur, st)
    return dst


def stats_for_text(blame_text: str) -> dict[str, AuthorStats]:
    return fold_events(parse_blame(blame_text), {})


def total_lines(stats: dict[str, AuthorStats]) -> int:
    return sum(st.lines for st in stats.values())
