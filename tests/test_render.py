from __future__ import annotations

import datetime as dt
from pathlib import Path

from git_work.models import CommitRecord, Feed
from git_work.periods import MODE_DAYS, MODE_MONTH, TimeWindow
from git_work.render import BOLD, DIM, GREEN, RED, RESET, format_time_local, relative_repo, render_pretty, render_raw

UTC = dt.timezone.utc
BASE = Path("/work")
TS = int(dt.datetime(2025, 6, 15, 9, 5, tzinfo=UTC).timestamp())


def _feed(*commits: CommitRecord) -> Feed:
    return Feed(commits=list(commits), matched=len(commits), errors={})


def test_raw_line() -> None:
    c = CommitRecord(repo=BASE / "proj", time=TS, sha="0123456789abcdef" * 2 + "01234567", summary="Fix it", insertions=3, deletions=1)
    assert render_raw(_feed(c), BASE, tz=UTC) == "2025-06-15 09:05\tproj\t0123456\t+3\t-1\tFix it"


def test_raw_short_id_of_short_sha() -> None:
    c = CommitRecord(repo=BASE / "proj", time=TS, sha="abc", summary="s")
    assert render_raw(_feed(c), BASE, tz=UTC).split("\t")[2] == "abc"


def test_pretty_aligns_columns() -> None:
    feed = _feed(
        CommitRecord(repo=BASE / "a", time=TS, sha="1" * 40, summary="first", insertions=3, deletions=120),
        CommitRecord(repo=BASE / "group" / "longer", time=TS - 60, sha="2" * 40, summary="second", insertions=1500, deletions=0),
    )
    out = render_pretty(feed, BASE, TimeWindow(mode=MODE_DAYS, since=0, days=7), color=False, tz=UTC).split("\n")
    assert out[0] == "2025-06-15 09:05  a             1111111     +3 -120  first"
    assert out[1] == "2025-06-15 09:04  group/longer  2222222  +1500   -0  second"
    assert out[2] == ""
    assert out[3] == "2 commits shown (last 7 days)"
    assert out[4] == "Total LoC: +1503 -120"


def test_pretty_colors() -> None:
    feed = _feed(CommitRecord(repo=BASE / "a", time=TS, sha="1" * 40, summary="s", insertions=2, deletions=1))
    out = render_pretty(feed, BASE, TimeWindow(mode=MODE_MONTH, since=0), tz=UTC)
    first = out.split("\n")[0]
    assert f"{BOLD}a{RESET}" in first
    assert f"{DIM}1111111{RESET}" in first
    assert f"{GREEN}+2{RESET} {RED}-1{RESET}" in first
    assert "1 commits shown (this month)" in out
    assert out.endswith(f"Total LoC: {GREEN}+2{RESET} {RED}-1{RESET}")


def test_relative_repo() -> None:
    assert relative_repo(BASE / "x" / "y", BASE) == str(Path("x") / "y")
    assert relative_repo(BASE, BASE) == "."
    assert relative_repo(Path("/elsewhere"), BASE) == str(Path("/elsewhere"))


def test_format_time_local_falls_back_to_timestamp() -> None:
    assert format_time_local(TS, UTC) == "2025-06-15 09:05"
    assert format_time_local(10**18, UTC) == str(10**18)
