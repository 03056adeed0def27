"""Shared test fixtures for TIL Insights tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A pinned reference time
- Factories for entries and goals relative to that time

Usage:
    def test_something(make_entry, fixed_now):
        entry = make_entry(days_ago=1, tags=["python"])
        ...
"""

import itertools
import os
import tempfile
from collections.abc import Callable, Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from tools.til.models import Goal, LogEntry
from tools.til.repository import SQLiteRepository


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
TOOLS_DIR = PROJECT_ROOT / "tools"

# Wednesday, mid-day, so "today" and "yesterday" never straddle midnight
FIXED_NOW = datetime(2026, 10, 14, 12, 0, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def repo(temp_db: Path) -> SQLiteRepository:
    """Repository backed by the temporary database."""
    return SQLiteRepository(temp_db)


# ─────────────────────────────────────────────────────────────────────────────
# Time Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def fixed_now() -> datetime:
    """Pinned reference time (naive local)."""
    return FIXED_NOW


# ─────────────────────────────────────────────────────────────────────────────
# Entity Factories
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_entry(fixed_now: datetime) -> Callable[..., LogEntry]:
    """Factory for entries created a number of days before fixed_now.

    Returns:
        callable(days_ago=0, tags=None, content=None, at=None, hours=0) -> LogEntry
    """
    counter = itertools.count(1)

    def _make(
        days_ago: int = 0,
        tags: list[str] | None = None,
        content: str | None = None,
        at: datetime | None = None,
        hours: int = 0,
    ) -> LogEntry:
        n = next(counter)
        created = at or (fixed_now - timedelta(days=days_ago, hours=hours))
        return LogEntry(
            id=f"entry-{n}",
            content=content or f"Learned thing number {n}",
            tags=tags or [],
            created_at=created.isoformat(),
        )

    return _make


@pytest.fixture
def make_goal(fixed_now: datetime) -> Callable[..., Goal]:
    """Factory for goals.

    Returns:
        callable(title="Learn Go", related_tags=None, target_entries=10, ...) -> Goal
    """
    counter = itertools.count(1)

    def _make(
        title: str = "Learn Go",
        related_tags: list[str] | None = None,
        target_entries: int | None = 10,
        status: str = "active",
        deadline: str | None = None,
    ) -> Goal:
        n = next(counter)
        return Goal(
            id=f"goal-{n}",
            title=title,
            related_tags=related_tags if related_tags is not None else ["go"],
            target_entries=target_entries,
            status=status,
            deadline=deadline,
            created_at=fixed_now.isoformat(),
        )

    return _make
