from __future__ import annotations

from .blame_aggregate import total_lines
from .models import AuthorStats, ReportRow
from .relative_time import format_relative_time


def rank_authors(stats: dict[str, AuthorStats]) -> list[tuple[str, AuthorStats]]:
    return sorted(stats.items(), key=lambda kv: (-kv[1].lines, kv[0]))


def build_report(stats: dict[str, AuthorStats], now: int | None = None) -> list[ReportRow]:
    total = total_lines(stats)
    if total <= 0:
        raise ValueError("no attributed lines to report")
    rows: list[ReportRow] = []
    for author, st in rank_authors(stats):
        rows.append(
            ReportRow(
                author=author,
                lines=st.lines,
                percentage=(st.lines / total) * 100.0,
                last_commit_time=st.last_commit_time,
                last_touched=format_relative_time(st.last_commit_time, now),
                commits=len(st.commits),
            )
        )
    return rows
