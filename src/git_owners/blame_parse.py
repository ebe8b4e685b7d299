from __future__ import annotations

import re
from typing import Iterator

from .models import AttributionEvent

# sha-1 (40) or sha-256 (64) object names; anything after the id is ignored.
_COMMIT_RE = re.compile(r"^([0-9a-fA-F]{64}|[0-9a-fA-F]{40})")

AUTHOR_PREFIX = "author "
AUTHOR_TIME_PREFIX = "author-time "


def _parse_time(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def parse_blame(text: str) -> Iterator[AttributionEvent]:
    """
    Parse `git blame --porcelain` / `--line-porcelain` output into one event per
    content line.

    Author, author time and commit are sticky: a block that omits them reuses
    the most recently seen values. Content lines seen before any author are
    dropped. Unknown lines are ignored and the parser never raises.
    """
    current_author: str | None = None
    current_time = 0
    current_sha: str | None = None

    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line.startswith("\t"):
            if current_author is not None:
                yield AttributionEvent(author=current_author, commit_id=current_sha, author_time=current_time)
            continue
        m = _COMMIT_RE.match(line)
        if m:
            current_sha = m.group(1)
        elif line.startswith(AUTHOR_PREFIX):
            current_author = line[len(AUTHOR_PREFIX) :]
        elif line.startswith(AUTHOR_TIME_PREFIX):
            current_time = _parse_time(line[len(AUTHOR_TIME_PREFIX) :])
