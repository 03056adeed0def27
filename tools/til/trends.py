"""
Tool: Trend Builder
Purpose: Bucket entries into day, week and month windows for charts and summaries

Bucket boundaries come from calendar arithmetic on the reference time,
never from the entries themselves. Each bucket is a half-open interval
[start, end). Empty buckets are reported with count 0, never skipped.
All sequences are returned oldest-first.

Windows:
    daily:   calendar days, the last one being today
    weekly:  rolling 7-day windows, the last one ending at now
    monthly: calendar months, the last one being the current month
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from tools.til import DAY_NAMES, TIME_RANGES
from tools.til.models import DayBucket, LogEntry, MonthBucket, WeekBucket, WeekdayCount
from tools.til.progress import round_half_up
from tools.til.timeutil import ONE_DAY, add_months, parse_timestamp, resolve_now, start_of_day

ONE_WEEK = timedelta(days=7)


def _timestamps(entries: Iterable[LogEntry]) -> list[datetime]:
    return [parse_timestamp(e.created_at) for e in entries]


def _count_between(stamps: Sequence[datetime], start: datetime, end: datetime) -> int:
    return sum(1 for ts in stamps if start <= ts < end)


def entries_between(entries: Iterable[LogEntry], start: datetime, end: datetime) -> list[LogEntry]:
    return [e for e in entries if start <= parse_timestamp(e.created_at) < end]


def daily_activity(
    entries: Iterable[LogEntry], window_days: int = 28, now: datetime | None = None
) -> list[DayBucket]:
    today = resolve_now(now).date()
    stamps = _timestamps(entries)

    buckets = []
    for offset in range(window_days - 1, -1, -1):
        day = today - timedelta(days=offset)
        start = start_of_day(day)
        buckets.append(DayBucket(day=day, count=_count_between(stamps, start, start + ONE_DAY)))
    return buckets


def weekly_activity(
    entries: Iterable[LogEntry], week_count: int = 4, now: datetime | None = None
) -> list[WeekBucket]:
    """Rolling 7-day windows ending at now, labelled W1 (oldest) .. Wn."""
    ref = resolve_now(now)
    stamps = _timestamps(entries)

    buckets = []
    for i in range(week_count - 1, -1, -1):
        end = ref - i * ONE_WEEK
        start = end - ONE_WEEK
        buckets.append(
            WeekBucket(
                label=f"W{week_count - i}",
                start=start,
                end=end,
                count=_count_between(stamps, start, end),
            )
        )
    return buckets


def monthly_activity(
    entries: Iterable[LogEntry], month_count: int = 3, now: datetime | None = None
) -> list[MonthBucket]:
    this_month = resolve_now(now).date().replace(day=1)
    stamps = _timestamps(entries)

    buckets = []
    for i in range(month_count - 1, -1, -1):
        first = add_months(this_month, -i)
        start = start_of_day(first)
        end = start_of_day(add_months(first, 1))
        buckets.append(
            MonthBucket(
                month=first.strftime("%B"),
                start=first,
                count=_count_between(stamps, start, end),
            )
        )
    return buckets


def weekday_histogram(entries: Iterable[LogEntry]) -> list[int]:
    """All-time entry counts per weekday, Sunday=0 .. Saturday=6."""
    counts = [0] * 7
    for ts in _timestamps(entries):
        # datetime.weekday() is Monday=0
        counts[(ts.weekday() + 1) % 7] += 1
    return counts


def weekday_distribution(entries: Iterable[LogEntry]) -> list[WeekdayCount]:
    return [
        WeekdayCount(day=name, count=count)
        for name, count in zip(DAY_NAMES, weekday_histogram(entries))
    ]


def least_active_weekday(entries: Iterable[LogEntry]) -> int:
    """Index (Sunday=0) of the weekday with fewest entries; lowest index wins ties."""
    counts = weekday_histogram(entries)
    return counts.index(min(counts))


def week_over_week(entries: Iterable[LogEntry], now: datetime | None = None) -> dict[str, int]:
    ref = resolve_now(now)
    stamps = _timestamps(entries)
    this_week = _count_between(stamps, ref - ONE_WEEK, datetime.max)
    last_week = _count_between(stamps, ref - 2 * ONE_WEEK, ref - ONE_WEEK)

    if last_week > 0:
        change = round_half_up((this_week - last_week) / last_week * 100)
    elif this_week > 0:
        change = 100
    else:
        change = 0

    return {"this_week": this_week, "last_week": last_week, "change": change}


def average_entries_per_day(entries: Iterable[LogEntry], now: datetime | None = None) -> float:
    stamps = sorted(_timestamps(entries))
    if not stamps:
        return 0
    elapsed = (resolve_now(now) - stamps[0]) / ONE_DAY
    days = max(1, math.ceil(elapsed))
    return round_half_up(len(stamps) / days * 10) / 10


def filter_by_range(
    entries: Iterable[LogEntry], time_range: str = "30d", now: datetime | None = None
) -> list[LogEntry]:
    """Entries newer than the range cutoff; unknown ranges fall back to 30d."""
    entries = list(entries)
    if time_range not in TIME_RANGES:
        time_range = "30d"
    days = TIME_RANGES[time_range]
    if days is None:
        return entries
    cutoff = resolve_now(now) - timedelta(days=days)
    return [e for e in entries if parse_timestamp(e.created_at) >= cutoff]
