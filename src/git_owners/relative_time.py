from __future__ import annotations

import time

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def format_relative_time(timestamp: int, now: int | None = None) -> str:
    """
    Human readable age of `timestamp` relative to `now` (both epoch seconds).

    Units are whole and truncated. Timestamps in the future count as zero
    duration. Up to one whole minute reads "just now"; minutes and hours are
    always plural.
    """
    if now is None:
        now = int(time.time())
    duration = max(0, int(now) - int(timestamp))

    days = duration // DAY
    if days == 0:
        hours = duration // HOUR
        if hours == 0:
            minutes = duration // MINUTE
            if minutes <= 1:
                return "just now"
            return f"{minutes} minutes ago"
        return f"{hours} hours ago"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")
