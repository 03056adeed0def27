"""
Tool: Streak Calculator
Purpose: Count consecutive calendar days with at least one logged entry

A streak is measured in local calendar days. Several entries on the
same day count once. The current streak stays alive through today even
if nothing has been logged yet: it anchors to yesterday when today is
still empty.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from tools.til.models import LogEntry
from tools.til.timeutil import ONE_DAY, local_day, resolve_now


def unique_days(entries: Iterable[LogEntry]) -> set[date]:
    return {local_day(e.created_at) for e in entries}


def current_streak(entries: Iterable[LogEntry], now: datetime | None = None) -> int:
    """
    Length of the run of consecutive days ending today (or yesterday).

    Returns 0 when neither today nor yesterday has an entry.
    """
    days = unique_days(entries)
    if not days:
        return 0

    check = resolve_now(now).date()
    if check not in days:
        check -= ONE_DAY
        if check not in days:
            return 0

    streak = 0
    while check in days:
        streak += 1
        check -= ONE_DAY
    return streak


def longest_streak(entries: Iterable[LogEntry]) -> int:
    """Length of the longest run of consecutive days, anywhere in history."""
    days = sorted(unique_days(entries))
    if not days:
        return 0

    longest = run = 1
    for prev, day in zip(days, days[1:]):
        if day - prev == ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def has_entry_on(entries: Iterable[LogEntry], day: date) -> bool:
    return any(local_day(e.created_at) == day for e in entries)
