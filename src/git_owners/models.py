from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class AttributionEvent:
    author: str
    commit_id: str | None
    author_time: int


@dataclasses.dataclass
class AuthorStats:
    lines: int = 0
    last_commit_time: int = 0
    commits: set[str] = dataclasses.field(default_factory=set)


@dataclasses.dataclass(frozen=True)
class ReportRow:
    author: str
    lines: int
    percentage: float
    last_commit_time: int
    last_touched: str
    commits: int
