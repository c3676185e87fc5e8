from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Optional

from .models import CommitRecord, Feed
from .periods import TimeWindow

BOLD = "\x1b[1m"
DIM = "\x1b[2m"
GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[0m"

TIME_FORMAT = "%Y-%m-%d %H:%M"


def paint(s: str, code: str, *, color: bool) -> str:
    if not color:
        return s
    return f"{code}{s}{RESET}"


def format_time_local(ts: int, tz: Optional[dt.tzinfo] = None) -> str:
    try:
        return dt.datetime.fromtimestamp(ts, tz).strftime(TIME_FORMAT)
    except (OverflowError, OSError, ValueError):
        return str(ts)


def relative_repo(repo: Path, base: Path) -> str:
    try:
        return str(repo.relative_to(base))
    except ValueError:
        return str(repo)


def render_raw(feed: Feed, base: Path, *, tz: Optional[dt.tzinfo] = None) -> str:
    # time\trepo\thash\t+ins\t-del\tsummary
    lines = [
        f"{format_time_local(c.time, tz)}\t{relative_repo(c.repo, base)}\t{c.short_id}\t+{c.insertions}\t-{c.deletions}\t{c.summary}"
        for c in feed.commits
    ]
    return "\n".join(lines)


def _column_width(values: list[str]) -> int:
    return max((len(v) for v in values), default=0)


def render_commit_lines(
    commits: list[CommitRecord],
    base: Path,
    *,
    color: bool = True,
    tz: Optional[dt.tzinfo] = None,
) -> list[str]:
    # Widths come from the displayed commits only.
    repos = [relative_repo(c.repo, base) for c in commits]
    plus = [f"+{c.insertions}" for c in commits]
    minus = [f"-{c.deletions}" for c in commits]
    repo_w = _column_width(repos)
    plus_w = _column_width(plus)
    minus_w = _column_width(minus)

    lines: list[str] = []
    for c, repo, p, m in zip(commits, repos, plus, minus):
        lines.append(
            "  ".join(
                [
                    format_time_local(c.time, tz),
                    paint(repo.ljust(repo_w), BOLD, color=color),
                    paint(c.short_id, DIM, color=color),
                    paint(p.rjust(plus_w), GREEN, color=color) + " " + paint(m.rjust(minus_w), RED, color=color),
                    c.summary,
                ]
            )
        )
    return lines


def render_pretty(
    feed: Feed,
    base: Path,
    window: TimeWindow,
    *,
    color: bool = True,
    tz: Optional[dt.tzinfo] = None,
) -> str:
    lines = render_commit_lines(feed.commits, base, color=color, tz=tz)
    lines.append("")
    lines.append(f"{len(feed.commits)} commits shown ({window.label})")
    lines.append(
        "Total LoC: "
        + paint(f"+{feed.insertions}", GREEN, color=color)
        + " "
        + paint(f"-{feed.deletions}", RED, color=color)
    )
    return "\n".join(lines)
