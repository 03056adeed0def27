"""
Tool: Goal Progress Evaluator
Purpose: Measure how far a goal is toward its target entry count

An entry counts toward a goal when any of its tags matches any of the
goal's related tags, ignoring case. The relation is derived on demand
and never stored; an entry's goalId is not consulted.

Progress reaching 100 does not change the goal's status.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from tools.til.models import Goal, LogEntry


def is_related(goal: Goal, entry: LogEntry) -> bool:
    wanted = {t.lower() for t in goal.related_tags}
    return any(t.lower() in wanted for t in entry.tags)


def related_entries(goal: Goal, entries: Iterable[LogEntry]) -> list[LogEntry]:
    return [e for e in entries if is_related(goal, e)]


def round_half_up(value: float) -> int:
    # round() is banker's rounding; 82.5% should read as 83
    return int(math.floor(value + 0.5))


def goal_progress(goal: Goal, entries: Iterable[LogEntry]) -> int:
    """
    Percentage of the goal's target reached, 0..100.

    Returns 0 when the goal has no positive target.
    """
    target = goal.target_entries
    if not target or target <= 0:
        return 0
    matched = len(related_entries(goal, entries))
    return max(0, min(100, round_half_up(matched / target * 100)))
