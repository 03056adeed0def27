"""
Tool: TIL Insights
Purpose: Record learnings and goals, and report streaks, trends and suggestions

Every function takes the repository explicitly and returns the usual
result envelope: {"success": bool, "data": ..., "message"/"error": str}.
Reports are computed from a fresh snapshot on each call; nothing is
cached between calls.

Usage:
    python -m tools.til.insights --action add-entry --content "Python dicts keep insertion order" --tags python
    python -m tools.til.insights --action stats
    python -m tools.til.insights --action entries
    python -m tools.til.insights --action analytics
    python -m tools.til.insights --action suggestions --seed 42
    python -m tools.til.insights --action trends --range 90d
    python -m tools.til.insights --action add-goal --title "Learn Go" --tags go --target 10
    python -m tools.til.insights --action goal --goal-id goal-abc123
    python -m tools.til.insights --action update-goal --goal-id goal-abc123 --status completed

Dependencies:
    - pydantic (validation at the input boundary)
    - yaml (PyYAML, thresholds in args/til.yaml)
    - structlog (logging)

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from tools.logging_config import bind_cli_context, get_logger, setup_logging
from tools.til import GOAL_STATUSES, TIME_RANGES
from tools.til.config_models import TilConfig, load_config
from tools.til.errors import TilError
from tools.til.models import Goal, LogEntry, normalize_tags
from tools.til.progress import goal_progress, related_entries
from tools.til.repository import (
    Repository,
    SQLiteRepository,
    generate_entry_id,
    generate_goal_id,
)
from tools.til.streaks import current_streak, longest_streak
from tools.til.suggestions import generate_suggestions
from tools.til.tags import top_tags
from tools.til.timeutil import is_iso_timestamp, resolve_now
from tools.til.trends import (
    average_entries_per_day,
    daily_activity,
    filter_by_range,
    monthly_activity,
    week_over_week,
    weekday_distribution,
    weekly_activity,
)

logger = get_logger(__name__)


def _dump(items) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def _validation_message(e: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())


# ─────────────────────────────────────────────────────────────────────────────
# Reports
# ─────────────────────────────────────────────────────────────────────────────


def get_learning_stats(
    repo: Repository, now: datetime | None = None, config: TilConfig | None = None
) -> dict[str, Any]:
    """
    Headline numbers for the dashboard.

    Returns:
        dict with total entries, streaks, top tags, this week's count, active goals
    """
    config = config or TilConfig()
    ref = resolve_now(now)
    entries = repo.list_entries()
    goals = repo.list_goals()

    return {
        "success": True,
        "data": {
            "totalEntries": len(entries),
            "currentStreak": current_streak(entries, ref),
            "longestStreak": longest_streak(entries),
            "topTags": _dump(top_tags(entries, config.analytics.top_tags_limit)),
            "thisWeekEntries": week_over_week(entries, ref)["this_week"],
            "activeGoals": sum(1 for g in goals if g.status == "active"),
        },
    }


def get_analytics_summary(
    repo: Repository, now: datetime | None = None, config: TilConfig | None = None
) -> dict[str, Any]:
    """
    Full learning-pattern overview.

    Returns:
        dict with stats plus week-over-week change, weekday distribution,
        monthly counts, goal totals and average entries per day
    """
    config = config or TilConfig()
    ref = resolve_now(now)
    entries = repo.list_entries()
    goals = repo.list_goals()
    pace = week_over_week(entries, ref)

    return {
        "success": True,
        "data": {
            "totalEntries": len(entries),
            "currentStreak": current_streak(entries, ref),
            "longestStreak": longest_streak(entries),
            "topTags": _dump(top_tags(entries, config.analytics.summary_top_tags_limit)),
            "thisWeekEntries": pace["this_week"],
            "lastWeekEntries": pace["last_week"],
            "weekOverWeekChange": pace["change"],
            "dayOfWeekDistribution": _dump(weekday_distribution(entries)),
            "monthlyEntries": _dump(
                monthly_activity(entries, config.analytics.monthly_window_months, ref)
            ),
            "totalGoals": len(goals),
            "activeGoals": sum(1 for g in goals if g.status == "active"),
            "completedGoals": sum(1 for g in goals if g.status == "completed"),
            "averageEntriesPerDay": average_entries_per_day(entries, ref),
        },
    }


def get_trends(
    repo: Repository,
    time_range: str = "30d",
    now: datetime | None = None,
    config: TilConfig | None = None,
) -> dict[str, Any]:
    """Heatmap days, weekly bars and tag distribution for the analytics view."""
    config = config or TilConfig()
    ref = resolve_now(now)
    entries = repo.list_entries()
    in_range = filter_by_range(entries, time_range, ref)

    return {
        "success": True,
        "data": {
            "timeRange": time_range if time_range in TIME_RANGES else "30d",
            "daily": _dump(daily_activity(entries, config.analytics.daily_window_days, ref)),
            "weekly": _dump(weekly_activity(entries, config.analytics.weekly_window_weeks, ref)),
            "topTags": _dump(top_tags(in_range, config.analytics.summary_top_tags_limit)),
            "entriesInRange": len(in_range),
        },
    }


def get_goal_report(repo: Repository, goal_id: str) -> dict[str, Any]:
    try:
        goal = repo.get_goal(goal_id)
    except TilError as e:
        return {"success": False, "error": str(e)}

    entries = repo.list_entries()
    related = related_entries(goal, entries)

    return {
        "success": True,
        "data": {
            "goal": goal.model_dump(by_alias=True),
            "progress": goal_progress(goal, entries),
            "relatedCount": len(related),
            "recentEntries": _dump(related[:5]),
        },
    }


def get_suggestions(
    repo: Repository,
    now: datetime | None = None,
    rng: random.Random | None = None,
    config: TilConfig | None = None,
) -> dict[str, Any]:
    config = config or TilConfig()
    suggestions = generate_suggestions(
        repo.list_entries(), repo.list_goals(), now=now, rng=rng, config=config.suggestions
    )

    if not suggestions:
        return {
            "success": True,
            "data": [],
            "message": "Start learning to get suggestions. Log your first entry!",
        }
    return {"success": True, "data": _dump(suggestions)}


def list_entries(repo: Repository) -> dict[str, Any]:
    entries = repo.list_entries()
    return {"success": True, "data": _dump(entries), "message": f"{len(entries)} entries"}


def list_goals(repo: Repository) -> dict[str, Any]:
    goals = repo.list_goals()
    return {"success": True, "data": _dump(goals), "message": f"{len(goals)} goals"}


def search_entries_by_tag(repo: Repository, tag: str) -> dict[str, Any]:
    needle = tag.lower().lstrip("#")
    matches = [e for e in repo.list_entries() if any(needle in t.lower() for t in e.tags)]
    return {"success": True, "data": _dump(matches), "message": f"{len(matches)} entries match #{needle}"}


# ─────────────────────────────────────────────────────────────────────────────
# Writes
# ─────────────────────────────────────────────────────────────────────────────


def add_entry(
    repo: Repository,
    content: str,
    tags: list[str] | None = None,
    source: str | None = None,
    source_name: str | None = None,
    goal_id: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Record something learned.

    Args:
        repo: Where to store it
        content: What was learned
        tags: Topic tags, cleaned to lowercase alphanumeric/hyphen
        source: URL or resource
        source_name: Human-readable source name
        goal_id: Optional goal this entry was logged for
        now: Creation time (defaults to the wall clock)

    Returns:
        dict with success status and the stored entry
    """
    try:
        entry = LogEntry(
            id=generate_entry_id(),
            content=content,
            tags=normalize_tags(tags),
            source=source,
            source_name=source_name,
            goal_id=goal_id,
            created_at=resolve_now(now).astimezone().isoformat(timespec="seconds"),
        )
    except ValidationError as e:
        return {"success": False, "error": _validation_message(e)}

    repo.save_entry(entry)
    return {
        "success": True,
        "data": entry.model_dump(by_alias=True),
        "message": f"Entry logged with ID {entry.id}",
    }


def add_goal(
    repo: Repository,
    title: str,
    related_tags: list[str] | None = None,
    description: str | None = None,
    deadline: str | None = None,
    target_entries: int | None = None,
    now: datetime | None = None,
    config: TilConfig | None = None,
) -> dict[str, Any]:
    config = config or TilConfig()
    if target_entries is None:
        target_entries = config.analytics.default_goal_target
    if target_entries <= 0:
        return {"success": False, "error": "Target entries must be a positive number"}
    if deadline and not is_iso_timestamp(deadline):
        return {"success": False, "error": f"Invalid deadline: {deadline!r}. Use an ISO date like 2026-12-01"}

    try:
        goal = Goal(
            id=generate_goal_id(),
            title=title,
            description=description,
            deadline=deadline,
            related_tags=normalize_tags(related_tags),
            target_entries=target_entries,
            status="active",
            created_at=resolve_now(now).astimezone().isoformat(timespec="seconds"),
        )
    except ValidationError as e:
        return {"success": False, "error": _validation_message(e)}

    repo.save_goal(goal)
    return {
        "success": True,
        "data": goal.model_dump(by_alias=True),
        "message": f"Goal created with ID {goal.id}",
    }


def update_goal_status(repo: Repository, goal_id: str, status: str) -> dict[str, Any]:
    if status not in GOAL_STATUSES:
        return {"success": False, "error": f"Invalid status. Must be one of: {list(GOAL_STATUSES)}"}
    try:
        goal = repo.update_goal(goal_id, status=status)
    except TilError as e:
        return {"success": False, "error": str(e)}
    return {"success": True, "data": goal.model_dump(by_alias=True)}


def delete_goal(repo: Repository, goal_id: str) -> dict[str, Any]:
    if not repo.delete_goal(goal_id):
        return {"success": False, "error": f"goal not found: {goal_id}"}
    return {"success": True, "data": {"deletedId": goal_id}}


def delete_entry(repo: Repository, entry_id: str) -> dict[str, Any]:
    if not repo.delete_entry(entry_id):
        return {"success": False, "error": f"entry not found: {entry_id}"}
    return {"success": True, "data": {"deletedId": entry_id}}


def clear_all_data(repo: Repository) -> dict[str, Any]:
    repo.clear_all()
    return {"success": True, "message": "All entries and goals have been cleared."}


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────


def _split_tags(value: str | None) -> list[str]:
    return [t for t in (value or "").split(",") if t.strip()]


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="TIL Insights - Learning log, goals, streaks and suggestions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Log something you learned
    python -m tools.til.insights --action add-entry \\
        --content "functools.cache memoizes without a size limit" --tags python,stdlib

    # Dashboard numbers
    python -m tools.til.insights --action stats

    # Suggestions, reproducible
    python -m tools.til.insights --action suggestions --seed 7

    # Goal progress
    python -m tools.til.insights --action goal --goal-id goal-abc123
        """,
    )

    parser.add_argument(
        "--action",
        required=True,
        choices=[
            "stats",
            "analytics",
            "suggestions",
            "streak",
            "tags",
            "trends",
            "goal",
            "search",
            "entries",
            "goals",
            "add-entry",
            "add-goal",
            "update-goal",
            "delete-goal",
            "delete-entry",
            "clear",
        ],
        help="Action to perform",
    )
    parser.add_argument("--db", help="Database path (defaults to data/til.db)")
    parser.add_argument("--config", help="Config path (defaults to args/til.yaml)")
    parser.add_argument("--now", help="Reference time, ISO 8601 (defaults to now)")
    parser.add_argument("--seed", type=int, help="Seed for the review suggestion pick")
    parser.add_argument("--content", help="Entry content")
    parser.add_argument("--tags", help="Comma-separated tags")
    parser.add_argument("--tag", help="Tag to search for")
    parser.add_argument("--source", help="Source URL")
    parser.add_argument("--source-name", help="Source name")
    parser.add_argument("--title", help="Goal title")
    parser.add_argument("--description", help="Goal description")
    parser.add_argument("--deadline", help="Goal deadline, ISO date")
    parser.add_argument("--target", type=int, help="Goal target entry count")
    parser.add_argument("--goal-id", help="Goal ID")
    parser.add_argument("--entry-id", help="Entry ID")
    parser.add_argument("--status", choices=list(GOAL_STATUSES), help="New goal status")
    parser.add_argument("--range", default="30d", choices=list(TIME_RANGES), help="Trend time range")
    parser.add_argument("--limit", type=int, help="Number of tags to return")

    args = parser.parse_args(argv)
    setup_logging()
    bind_cli_context(action=args.action)

    repo = SQLiteRepository(args.db)
    config = load_config(args.config)
    now = None
    if args.now:
        try:
            now = datetime.fromisoformat(args.now)
        except ValueError:
            print(json.dumps({"success": False, "error": f"Invalid --now: {args.now}"}))
            sys.exit(1)
    rng = random.Random(args.seed) if args.seed is not None else None

    result = None

    if args.action == "stats":
        result = get_learning_stats(repo, now, config)

    elif args.action == "analytics":
        result = get_analytics_summary(repo, now, config)

    elif args.action == "suggestions":
        result = get_suggestions(repo, now, rng, config)

    elif args.action == "streak":
        entries = repo.list_entries()
        result = {
            "success": True,
            "data": {
                "currentStreak": current_streak(entries, now),
                "longestStreak": longest_streak(entries),
            },
        }

    elif args.action == "tags":
        limit = args.limit if args.limit is not None else config.analytics.top_tags_limit
        result = {"success": True, "data": _dump(top_tags(repo.list_entries(), limit))}

    elif args.action == "trends":
        result = get_trends(repo, args.range, now, config)

    elif args.action == "entries":
        result = list_entries(repo)

    elif args.action == "goals":
        result = list_goals(repo)

    elif args.action == "search":
        if not args.tag:
            print(json.dumps({"success": False, "error": "--tag required"}))
            sys.exit(1)
        result = search_entries_by_tag(repo, args.tag)

    elif args.action == "goal":
        if not args.goal_id:
            print(json.dumps({"success": False, "error": "--goal-id required"}))
            sys.exit(1)
        result = get_goal_report(repo, args.goal_id)

    elif args.action == "add-entry":
        if not args.content:
            print(json.dumps({"success": False, "error": "--content required"}))
            sys.exit(1)
        result = add_entry(
            repo,
            args.content,
            _split_tags(args.tags),
            source=args.source,
            source_name=args.source_name,
            goal_id=args.goal_id,
            now=now,
        )

    elif args.action == "add-goal":
        if not args.title:
            print(json.dumps({"success": False, "error": "--title required"}))
            sys.exit(1)
        result = add_goal(
            repo,
            args.title,
            _split_tags(args.tags),
            description=args.description,
            deadline=args.deadline,
            target_entries=args.target,
            now=now,
            config=config,
        )

    elif args.action == "update-goal":
        if not args.goal_id or not args.status:
            print(json.dumps({"success": False, "error": "--goal-id and --status required"}))
            sys.exit(1)
        result = update_goal_status(repo, args.goal_id, args.status)

    elif args.action == "delete-goal":
        if not args.goal_id:
            print(json.dumps({"success": False, "error": "--goal-id required"}))
            sys.exit(1)
        result = delete_goal(repo, args.goal_id)

    elif args.action == "delete-entry":
        if not args.entry_id:
            print(json.dumps({"success": False, "error": "--entry-id required"}))
            sys.exit(1)
        result = delete_entry(repo, args.entry_id)

    elif args.action == "clear":
        result = clear_all_data(repo)

    if result:
        print(json.dumps(result, indent=2, default=str))
        if not result.get("success"):
            sys.exit(1)


if __name__ == "__main__":
    main()
