"""TIL Engine - Learning-activity analytics and suggestions

Philosophy:
    Logging what you learned should take ten seconds.
    Everything else (streaks, trends, nudges) is derived, never entered.
    The analytics never mutate what the user wrote.

Components:
    models.py: LogEntry, Goal, bucket and suggestion types
    timeutil.py: Timestamp parsing and the reference "now"
    streaks.py: Current and longest consecutive-day streaks
    tags.py: Frequency-ranked tag lists
    progress.py: Goal completion from related entries
    trends.py: Day/week/month buckets and weekday distribution
    suggestions.py: Prioritized, actionable suggestions
    repository.py: SQLite-backed store of entries and goals
    insights.py: Tool-level reports and the CLI

Usage:
    from tools.til.repository import SQLiteRepository
    from tools.til.suggestions import generate_suggestions

    repo = SQLiteRepository()
    for s in generate_suggestions(repo.list_entries(), repo.list_goals()):
        print(s.title)

Database: data/til.db (override with TIL_DB_PATH)
    - entries: LogEntry rows, tags as JSON
    - goals: Goal rows, related tags as JSON

Configuration: args/til.yaml (override with TIL_CONFIG_PATH)
    - Suggestion thresholds and priorities
    - Default analytics windows
"""

import os
from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("TIL_DB_PATH", PROJECT_ROOT / "data" / "til.db"))
CONFIG_PATH = Path(os.environ.get("TIL_CONFIG_PATH", PROJECT_ROOT / "args" / "til.yaml"))

# Valid goal statuses
GOAL_STATUSES = ("active", "completed", "paused")

# Suggestion variants
SUGGESTION_TYPES = ("streak", "goal", "explore", "review", "consistency")

# Sunday-first, matching the weekday histogram indices
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Analytics time ranges
TIME_RANGES = {"7d": 7, "30d": 30, "90d": 90, "all": None}

__all__ = [
    "PROJECT_ROOT",
    "DB_PATH",
    "CONFIG_PATH",
    "GOAL_STATUSES",
    "SUGGESTION_TYPES",
    "DAY_NAMES",
    "TIME_RANGES",
]
