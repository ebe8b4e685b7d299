from __future__ import annotations

import json
import os
from typing import TextIO

from .models import ReportRow

ORANGE = "\x1b[38;5;208m"
DIM = "\x1b[2m"
RESET = "\x1b[0m"


def color_enabled(stream: TextIO, *, enabled: bool = True) -> bool:
    if not enabled:
        return False
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def format_row(row: ReportRow, *, color: bool) -> str:
    pct = f"{row.percentage:>5.1f}%"
    touched = f"(last touched {row.last_touched})"
    if color:
        return f"{ORANGE}{row.author}{RESET}  {pct}  {DIM}{touched}{RESET}"
    return f"{row.author}  {pct}  {touched}"


def render_text(rows: list[ReportRow], *, verbose: bool, only_name: bool, color: bool) -> str:
    if not rows:
        return ""
    if only_name:
        names = [r.author for r in rows] if verbose else [rows[0].author]
        return "\n".join(names) + "\n"
    if verbose:
        lines = [""]
        lines.extend(format_row(r, color=color) for r in rows)
        lines.append("")
        return "\n".join(lines) + "\n"
    return format_row(rows[0], color=color) + "\n"


def report_payload(rows: list[ReportRow]) -> list[dict[str, object]]:
    return [
        {
            "author": r.author,
            "lines": int(r.lines),
            "percentage": round(float(r.percentage), 4),
            "last_commit_time": int(r.last_commit_time),
            "last_touched": r.last_touched,
            "commits": int(r.commits),
        }
        for r in rows
    ]


def render_json(rows: list[ReportRow]) -> str:
    return json.dumps(report_payload(rows), indent=2, ensure_ascii=False) + "\n"
