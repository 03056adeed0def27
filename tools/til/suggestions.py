"""
Tool: Suggestion Generator
Purpose: Turn streaks, tags, goals and trends into a short list of nudges

Every rule is evaluated independently against the same snapshot. All
candidates are collected, then sorted by priority (highest first) and
cut to the configured maximum, so high-priority nudges can crowd out
low-priority ones.

Rules (priority):
    start_streak (10)          nothing today, no streak
    keep_streak (9)            nothing today, streak alive from yesterday
    deadline_approaching (9)   active goal due in 1..7 days, under 80%
    almost_there (8)           active goal at 80..99%
    set_goal (7)               no active goals, more than 3 entries
    diversify (5)              one tag in more than half of 6+ entries
    review (4)                 more than 5 entries older than 14 days
    milestone_streak (3)       logged today, streak of 7+ days
    consistency (2)            more than 14 entries; names the quietest weekday

Equal priorities keep the order in which the rules were evaluated:
streak rules, set_goal, then per active goal (in input order)
almost_there before deadline_approaching, then diversify, review,
consistency.
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from datetime import datetime

from tools.logging_config import get_logger
from tools.til import DAY_NAMES
from tools.til.config_models import SuggestionConfig
from tools.til.models import (
    ConsistencySuggestion,
    ExploreSuggestion,
    Goal,
    GoalSuggestion,
    LogEntry,
    ReviewSuggestion,
    StreakSuggestion,
    Suggestion,
)
from tools.til.progress import goal_progress
from tools.til.streaks import current_streak, has_entry_on
from tools.til.tags import top_tags
from tools.til.timeutil import ONE_DAY, parse_timestamp, resolve_now
from tools.til.trends import least_active_weekday

logger = get_logger(__name__)

PRIORITIES = {
    "start_streak": 10,
    "keep_streak": 9,
    "deadline_approaching": 9,
    "almost_there": 8,
    "set_goal": 7,
    "diversify": 5,
    "review": 4,
    "milestone_streak": 3,
    "consistency": 2,
}


def _streak_suggestion(
    entries: Sequence[LogEntry], now: datetime, config: SuggestionConfig
) -> StreakSuggestion | None:
    streak = current_streak(entries, now)
    logged_today = has_entry_on(entries, now.date())

    if not logged_today and streak == 0:
        return StreakSuggestion(
            kind="start_streak",
            title="Start Your Streak!",
            description="You haven't logged anything today. Even a small learning counts!",
            action="Log something you learned",
            priority=PRIORITIES["start_streak"],
        )
    if not logged_today:
        return StreakSuggestion(
            kind="keep_streak",
            streak=streak,
            title=f"Keep Your {streak}-Day Streak!",
            description=f"You're on a {streak}-day streak. Don't break it!",
            action="Log today's learning",
            priority=PRIORITIES["keep_streak"],
        )
    if streak >= config.milestone_streak_days:
        return StreakSuggestion(
            kind="milestone_streak",
            streak=streak,
            title=f"Amazing {streak}-Day Streak!",
            description="You're building an incredible habit. Consider setting a more ambitious goal.",
            priority=PRIORITIES["milestone_streak"],
        )
    return None


def days_until(deadline: str, now: datetime) -> int:
    """Whole days until the deadline, rounded up; negative once it has passed."""
    return math.ceil((parse_timestamp(deadline) - now) / ONE_DAY)


def _goal_suggestions(
    entries: Sequence[LogEntry],
    goals: Sequence[Goal],
    now: datetime,
    config: SuggestionConfig,
) -> list[GoalSuggestion]:
    suggestions: list[GoalSuggestion] = []
    active = [g for g in goals if g.status == "active"]

    if not active and len(entries) > config.set_goal_min_entries:
        suggestions.append(
            GoalSuggestion(
                kind="set_goal",
                title="Set a Learning Goal",
                description="You've been learning consistently. Setting a goal can help you stay focused.",
                action="Create a goal",
                priority=PRIORITIES["set_goal"],
            )
        )

    for goal in active:
        progress = goal_progress(goal, entries)

        if config.almost_there_percent <= progress < 100:
            focus = goal.related_tags[0] if goal.related_tags else goal.title
            suggestions.append(
                GoalSuggestion(
                    kind="almost_there",
                    goal_id=goal.id,
                    progress=progress,
                    title=f"Almost There: {goal.title}",
                    description=f"You're {progress}% through your goal. Just a few more entries!",
                    action=f"Log something about {focus}",
                    priority=PRIORITIES["almost_there"],
                )
            )

        if goal.deadline:
            days_left = days_until(goal.deadline, now)
            if 0 < days_left <= config.deadline_window_days and progress < config.almost_there_percent:
                suggestions.append(
                    GoalSuggestion(
                        kind="deadline_approaching",
                        goal_id=goal.id,
                        progress=progress,
                        title=f"Deadline Approaching: {goal.title}",
                        description=f"{days_left} days left and you're at {progress}%. Time to focus!",
                        priority=PRIORITIES["deadline_approaching"],
                    )
                )

    return suggestions


def _explore_suggestion(
    entries: Sequence[LogEntry], config: SuggestionConfig
) -> ExploreSuggestion | None:
    if len(entries) <= config.diversify_min_entries:
        return None
    ranked = top_tags(entries, config.top_tags_scan)
    if not ranked:
        return None
    dominant = ranked[0]
    if dominant.count <= len(entries) * config.diversify_share:
        return None
    return ExploreSuggestion(
        tag=dominant.tag,
        title="Diversify Your Learning",
        description=f"Most of your entries are about #{dominant.tag}. Try exploring related topics!",
        priority=PRIORITIES["diversify"],
    )


def _quote(content: str, length: int) -> str:
    if len(content) > length:
        return content[:length] + "..."
    return content


def _review_suggestion(
    entries: Sequence[LogEntry],
    now: datetime,
    rng: random.Random,
    config: SuggestionConfig,
) -> ReviewSuggestion | None:
    max_age = config.review_age_days * ONE_DAY
    old = [e for e in entries if now - parse_timestamp(e.created_at) > max_age]
    if len(old) <= config.review_min_entries:
        return None

    # Fixed order so a seeded rng always picks the same entry
    old.sort(key=lambda e: (parse_timestamp(e.created_at), e.id))
    picked = rng.choice(old)
    return ReviewSuggestion(
        entry_id=picked.id,
        title="Review Past Learning",
        description=f'Remember when you learned: "{_quote(picked.content, config.review_quote_length)}"',
        action="Revisit and expand",
        priority=PRIORITIES["review"],
    )


def _consistency_suggestion(
    entries: Sequence[LogEntry], config: SuggestionConfig
) -> ConsistencySuggestion | None:
    if len(entries) <= config.consistency_min_entries:
        return None
    day = DAY_NAMES[least_active_weekday(entries)]
    return ConsistencySuggestion(
        weekday=day,
        title=f"{day}s Are Quiet",
        description=f"You log the least on {day}s. Try to be consistent across the week.",
        priority=PRIORITIES["consistency"],
    )


def generate_suggestions(
    entries: Sequence[LogEntry],
    goals: Sequence[Goal],
    now: datetime | None = None,
    rng: random.Random | None = None,
    config: SuggestionConfig | None = None,
) -> list[Suggestion]:
    """
    Build the prioritized suggestion list for a snapshot of entries and goals.

    Args:
        entries: Log entries, any order
        goals: Goals, any order
        now: Reference time (defaults to local wall clock)
        rng: Randomness for the review pick (defaults to an unseeded Random)
        config: Thresholds (defaults to SuggestionConfig())

    Returns:
        At most config.max_suggestions suggestions, priority descending
    """
    entries = list(entries)
    goals = list(goals)
    ref = resolve_now(now)
    rng = rng or random.Random()
    config = config or SuggestionConfig()

    candidates: list[Suggestion] = []

    streak = _streak_suggestion(entries, ref, config)
    if streak is not None:
        candidates.append(streak)

    candidates.extend(_goal_suggestions(entries, goals, ref, config))

    for suggestion in (
        _explore_suggestion(entries, config),
        _review_suggestion(entries, ref, rng, config),
        _consistency_suggestion(entries, config),
    ):
        if suggestion is not None:
            candidates.append(suggestion)

    # sorted() is stable: equal priorities keep evaluation order
    ranked = sorted(candidates, key=lambda s: -s.priority)[: config.max_suggestions]

    logger.debug(
        "suggestions_generated",
        candidates=[s.kind for s in candidates],
        kept=[s.kind for s in ranked],
    )
    return ranked
