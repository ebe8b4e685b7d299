from __future__ import annotations

import io
import json

from git_owners.models import ReportRow
from git_owners.render import color_enabled, format_row, render_json, render_text


def _rows() -> list[ReportRow]:
    return [
        ReportRow(author="alice", lines=3, percentage=75.0, last_commit_time=10, last_touched="2 days ago", commits=2),
        ReportRow(author="bob", lines=1, percentage=25.0, last_commit_time=5, last_touched="1 year ago", commits=1),
    ]


class _Tty(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_format_row_plain_and_colored() -> None:
    row = _rows()[0]
    assert format_row(row, color=False) == "alice   75.0%  (last touched 2 days ago)"
    colored = format_row(row, color=True)
    assert colored.startswith("\x1b[38;5;208malice\x1b[0m")
    assert "\x1b[2m(last touched 2 days ago)\x1b[0m" in colored


def test_render_text_modes() -> None:
    rows = _rows()
    assert render_text(rows, verbose=False, only_name=False, color=False) == "alice   75.0%  (last touched 2 days ago)\n"
    assert render_text(rows, verbose=True, only_name=False, color=False).split("\n") == [
        "",
        "alice   75.0%  (last touched 2 days ago)",
        "bob   25.0%  (last touched 1 year ago)",
        "",
        "",
    ]
    assert render_text(rows, verbose=False, only_name=True, color=False) == "alice\n"
    assert render_text(rows, verbose=True, only_name=True, color=False) == "alice\nbob\n"


def test_render_json() -> None:
    data = json.loads(render_json(_rows()))
    assert [d["author"] for d in data] == ["alice", "bob"]
    assert data[0]["lines"] == 3
    assert data[0]["percentage"] == 75.0
    assert data[1]["last_touched"] == "1 year ago"


def test_color_enabled(monkeypatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert color_enabled(_Tty()) is True
    assert color_enabled(io.StringIO()) is False
    assert color_enabled(_Tty(), enabled=False) is False
    monkeypatch.setenv("NO_COLOR", "1")
    assert color_enabled(_Tty()) is False
