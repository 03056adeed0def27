"""
Tool: TIL Repository
Purpose: Persist log entries and goals, and notify listeners on change

The analytics layer never touches storage. Callers read a snapshot with
list_entries()/list_goals(), compute, and optionally write back. There
is no locking across that sequence: concurrent writers race and the
last write wins.

Dependencies:
    - sqlite3 (stdlib)
    - uuid (stdlib)
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from tools.logging_config import get_logger
from tools.til import DB_PATH
from tools.til.errors import EntityNotFoundError, ImmutableFieldError
from tools.til.models import Goal, LogEntry

logger = get_logger(__name__)

Listener = Callable[[str, dict[str, Any]], None]

IMMUTABLE_FIELDS = ("id", "created_at", "createdAt")


def generate_entry_id() -> str:
    return f"entry-{uuid.uuid4().hex}"


def generate_goal_id() -> str:
    return f"goal-{uuid.uuid4().hex}"


class Repository(Protocol):
    def list_entries(self) -> list[LogEntry]: ...

    def list_goals(self) -> list[Goal]: ...

    def get_entry(self, entry_id: str) -> LogEntry: ...

    def get_goal(self, goal_id: str) -> Goal: ...

    def save_entry(self, entry: LogEntry) -> LogEntry: ...

    def update_entry(self, entry_id: str, **changes: Any) -> LogEntry: ...

    def delete_entry(self, entry_id: str) -> bool: ...

    def save_goal(self, goal: Goal) -> Goal: ...

    def update_goal(self, goal_id: str, **changes: Any) -> Goal: ...

    def delete_goal(self, goal_id: str) -> bool: ...

    def clear_all(self) -> None: ...

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


def _entry_from_row(row: sqlite3.Row) -> LogEntry:
    return LogEntry(
        id=row["id"],
        content=row["content"],
        tags=json.loads(row["tags"] or "[]"),
        source=row["source"],
        source_name=row["source_name"],
        goal_id=row["goal_id"],
        created_at=row["created_at"],
    )


def _goal_from_row(row: sqlite3.Row) -> Goal:
    return Goal(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        deadline=row["deadline"],
        related_tags=json.loads(row["related_tags"] or "[]"),
        target_entries=row["target_entries"],
        status=row["status"],
        created_at=row["created_at"],
    )


def _check_mutable(changes: dict[str, Any]) -> None:
    for field in IMMUTABLE_FIELDS:
        if field in changes:
            raise ImmutableFieldError(field)


class SQLiteRepository:
    """Entries and goals in a single SQLite file."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH
        self._listeners: list[Listener] = []

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                id TEXT PRIMARY KEY,
                content TEXT NOT NULL,
                tags TEXT NOT NULL DEFAULT '[]',
                source TEXT,
                source_name TEXT,
                goal_id TEXT,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS goals (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT,
                deadline TEXT,
                related_tags TEXT NOT NULL DEFAULT '[]',
                target_entries INTEGER,
                status TEXT DEFAULT 'active' CHECK(status IN ('active', 'completed', 'paused')),
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_entries_created ON entries(created_at)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_goals_status ON goals(status)")

        conn.commit()
        return conn

    # ─────────────────────────────────────────────────────────────────────
    # Change notification
    # ─────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, **payload: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception as e:
                logger.warning("listener_failed", change_event=event, error=str(e))

    # ─────────────────────────────────────────────────────────────────────
    # Entries
    # ─────────────────────────────────────────────────────────────────────

    def list_entries(self) -> list[LogEntry]:
        """All entries, newest first (rowid breaks same-timestamp ties)."""
        conn = self.get_connection()
        rows = conn.execute("SELECT * FROM entries ORDER BY created_at DESC, rowid DESC").fetchall()
        conn.close()
        return [_entry_from_row(r) for r in rows]

    def get_entry(self, entry_id: str) -> LogEntry:
        conn = self.get_connection()
        row = conn.execute("SELECT * FROM entries WHERE id = ?", (entry_id,)).fetchone()
        conn.close()
        if row is None:
            raise EntityNotFoundError("entry", entry_id)
        return _entry_from_row(row)

    def save_entry(self, entry: LogEntry) -> LogEntry:
        conn = self.get_connection()
        conn.execute(
            """
            INSERT OR REPLACE INTO entries (id, content, tags, source, source_name, goal_id, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
            (
                entry.id,
                entry.content,
                json.dumps(entry.tags),
                entry.source,
                entry.source_name,
                entry.goal_id,
                entry.created_at,
            ),
        )
        conn.commit()
        conn.close()

        logger.info("entry_saved", entry_id=entry.id, tags=entry.tags)
        self._notify("entry_saved", id=entry.id)
        return entry

    def update_entry(self, entry_id: str, **changes: Any) -> LogEntry:
        _check_mutable(changes)
        current = self.get_entry(entry_id)
        updated = LogEntry.model_validate({**current.model_dump(), **changes})

        conn = self.get_connection()
        conn.execute(
            """
            UPDATE entries SET content = ?, tags = ?, source = ?, source_name = ?, goal_id = ?
            WHERE id = ?
        """,
            (
                updated.content,
                json.dumps(updated.tags),
                updated.source,
                updated.source_name,
                updated.goal_id,
                entry_id,
            ),
        )
        conn.commit()
        conn.close()

        logger.info("entry_updated", entry_id=entry_id, fields=sorted(changes))
        self._notify("entry_updated", id=entry_id)
        return updated

    def delete_entry(self, entry_id: str) -> bool:
        conn = self.get_connection()
        cursor = conn.execute("DELETE FROM entries WHERE id = ?", (entry_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()

        if deleted:
            logger.info("entry_deleted", entry_id=entry_id)
            self._notify("entry_deleted", id=entry_id)
        return deleted

    # ─────────────────────────────────────────────────────────────────────
    # Goals
    # ─────────────────────────────────────────────────────────────────────

    def list_goals(self) -> list[Goal]:
        conn = self.get_connection()
        rows = conn.execute("SELECT * FROM goals ORDER BY created_at DESC, rowid DESC").fetchall()
        conn.close()
        return [_goal_from_row(r) for r in rows]

    def get_goal(self, goal_id: str) -> Goal:
        conn = self.get_connection()
        row = conn.execute("SELECT * FROM goals WHERE id = ?", (goal_id,)).fetchone()
        conn.close()
        if row is None:
            raise EntityNotFoundError("goal", goal_id)
        return _goal_from_row(row)

    def save_goal(self, goal: Goal) -> Goal:
        conn = self.get_connection()
        conn.execute(
            """
            INSERT OR REPLACE INTO goals (id, title, description, deadline, related_tags, target_entries, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                goal.id,
                goal.title,
                goal.description,
                goal.deadline,
                json.dumps(goal.related_tags),
                goal.target_entries,
                goal.status,
                goal.created_at,
            ),
        )
        conn.commit()
        conn.close()

        logger.info("goal_saved", goal_id=goal.id, title=goal.title)
        self._notify("goal_saved", id=goal.id)
        return goal

    def update_goal(self, goal_id: str, **changes: Any) -> Goal:
        _check_mutable(changes)
        current = self.get_goal(goal_id)
        updated = Goal.model_validate({**current.model_dump(), **changes})

        conn = self.get_connection()
        conn.execute(
            """
            UPDATE goals SET title = ?, description = ?, deadline = ?, related_tags = ?,
                target_entries = ?, status = ?
            WHERE id = ?
        """,
            (
                updated.title,
                updated.description,
                updated.deadline,
                json.dumps(updated.related_tags),
                updated.target_entries,
                updated.status,
                goal_id,
            ),
        )
        conn.commit()
        conn.close()

        logger.info("goal_updated", goal_id=goal_id, fields=sorted(changes))
        self._notify("goal_updated", id=goal_id)
        return updated

    def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal. Entries pointing at it keep their goalId."""
        conn = self.get_connection()
        cursor = conn.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()

        if deleted:
            logger.info("goal_deleted", goal_id=goal_id)
            self._notify("goal_deleted", id=goal_id)
        return deleted

    def clear_all(self) -> None:
        conn = self.get_connection()
        conn.execute("DELETE FROM entries")
        conn.execute("DELETE FROM goals")
        conn.commit()
        conn.close()

        logger.info("store_cleared")
        self._notify("cleared")
