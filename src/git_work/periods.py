from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Optional

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_DAYS = 7

MODE_DAYS = "days"
MODE_TODAY = "today"
MODE_MONTH = "month"
MODE_LAST_MONTH = "last_month"
WINDOW_MODES = (MODE_DAYS, MODE_TODAY, MODE_MONTH, MODE_LAST_MONTH)


class WindowError(ValueError):
    pass


@dataclasses.dataclass(frozen=True)
class TimeWindow:
    mode: str
    since: int  # inclusive, epoch seconds
    until: Optional[int] = None  # exclusive, epoch seconds; None = through now
    days: int = DEFAULT_DAYS

    def contains(self, ts: int) -> bool:
        if ts < self.since:
            return False
        return self.until is None or ts < self.until

    @property
    def label(self) -> str:
        return describe_window(self.mode, self.days)

    @property
    def phrase(self) -> str:
        return window_phrase(self.mode, self.days)


def describe_window(mode: str, days: int = DEFAULT_DAYS) -> str:
    if mode == MODE_TODAY:
        return "today"
    if mode == MODE_MONTH:
        return "this month"
    if mode == MODE_LAST_MONTH:
        return "last month"
    return f"last {days} days"


def window_phrase(mode: str, days: int = DEFAULT_DAYS) -> str:
    if mode == MODE_DAYS:
        return f"the {describe_window(mode, days)}"
    return describe_window(mode, days)


def _local_now(now: Optional[dt.datetime], tz: Optional[dt.tzinfo]) -> dt.datetime:
    if now is None:
        return dt.datetime.now(tz) if tz is not None else dt.datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz) if tz is not None else now.astimezone()
    return now.astimezone(tz) if tz is not None else now.astimezone()


def local_midnight(day: dt.date, tz: Optional[dt.tzinfo] = None) -> int:
    """
    Epoch seconds of 00:00 local time on `day`.

    Ambiguous wall times resolve to the earlier instant and wall times inside a
    DST gap use the pre-transition offset (fold=0 in both cases), so a midnight
    skipped by a transition lands on the first instant after the gap.
    """
    try:
        if tz is None:
            midnight = dt.datetime(day.year, day.month, day.day)
        else:
            midnight = dt.datetime(day.year, day.month, day.day, tzinfo=tz)
        return int(midnight.timestamp())
    except (OverflowError, OSError, ValueError) as e:
        raise WindowError(f"Failed to resolve local midnight for {day.isoformat()}: {e}") from e


def first_of_previous_month(day: dt.date) -> dt.date:
    if day.month == 1:
        return dt.date(day.year - 1, 12, 1)
    return dt.date(day.year, day.month - 1, 1)


def compute_window(
    mode: str,
    *,
    days: int = DEFAULT_DAYS,
    now: Optional[dt.datetime] = None,
    tz: Optional[dt.tzinfo] = None,
) -> TimeWindow:
    if mode not in WINDOW_MODES:
        raise WindowError(f"Invalid window mode: {mode!r} (expected one of {', '.join(WINDOW_MODES)})")
    if days < 0:
        raise WindowError(f"--days must be >= 0, got {days}")

    local = _local_now(now, tz)

    if mode == MODE_DAYS:
        try:
            now_ts = int(local.timestamp())
        except (OverflowError, OSError, ValueError) as e:
            raise WindowError(f"Failed to compute the current time: {e}") from e
        return TimeWindow(mode=mode, since=now_ts - days * SECONDS_PER_DAY, until=None, days=days)

    today = local.date()
    if mode == MODE_TODAY:
        return TimeWindow(mode=mode, since=local_midnight(today, tz), days=days)

    this_month = dt.date(today.year, today.month, 1)
    if mode == MODE_MONTH:
        return TimeWindow(mode=mode, since=local_midnight(this_month, tz), days=days)

    since = local_midnight(first_of_previous_month(this_month), tz)
    until = local_midnight(this_month, tz)
    if since >= until:
        raise WindowError(f"Failed to resolve last month: start {since} is not before end {until}")
    return TimeWindow(mode=mode, since=since, until=until, days=days)
