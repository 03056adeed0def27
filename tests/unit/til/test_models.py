"""Tests for tools/til/models.py"""

import pytest
from pydantic import TypeAdapter, ValidationError

from tools.til.models import (
    ConsistencySuggestion,
    Goal,
    LogEntry,
    StreakSuggestion,
    Suggestion,
    normalize_tags,
)


class TestNormalizeTags:
    def test_lowercases_and_strips_hash(self):
        assert normalize_tags(["#React", "TypeScript"]) == ["react", "typescript"]

    def test_spaces_become_hyphens(self):
        assert normalize_tags(["react native"]) == ["react-native"]

    def test_drops_punctuation_and_empties(self):
        assert normalize_tags(["c++", "!!!", "  "]) == ["c"]

    def test_deduplicates_in_order(self):
        assert normalize_tags(["Go", "python", "go"]) == ["go", "python"]

    def test_none(self):
        assert normalize_tags(None) == []


class TestLogEntry:
    def test_accepts_camel_case_fields(self):
        entry = LogEntry.model_validate(
            {
                "id": "entry-1",
                "content": "Generators are lazy",
                "tags": ["python"],
                "sourceName": "Python Docs",
                "goalId": "goal-1",
                "createdAt": "2026-10-14T09:00:00",
            }
        )

        assert entry.source_name == "Python Docs"
        assert entry.goal_id == "goal-1"

    def test_dumps_with_original_field_names(self):
        entry = LogEntry(id="entry-1", content="x", created_at="2026-10-14T09:00:00")

        dumped = entry.model_dump(by_alias=True)

        assert dumped["createdAt"] == "2026-10-14T09:00:00"
        assert "sourceName" in dumped

    def test_rejects_blank_content(self):
        with pytest.raises(ValidationError):
            LogEntry(id="entry-1", content="   ", created_at="2026-10-14T09:00:00")

    def test_is_frozen(self):
        entry = LogEntry(id="entry-1", content="x", created_at="2026-10-14T09:00:00")

        with pytest.raises(ValidationError):
            entry.created_at = "2020-01-01T00:00:00"


class TestGoal:
    def test_defaults(self):
        goal = Goal(id="goal-1", title="Learn Go", created_at="2026-10-14T09:00:00")

        assert goal.status == "active"
        assert goal.related_tags == []
        assert goal.target_entries is None

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            Goal(id="goal-1", title="Learn Go", status="archived", created_at="2026-10-14")


class TestSuggestionUnion:
    def test_discriminates_on_type(self):
        adapter = TypeAdapter(Suggestion)

        parsed = adapter.validate_python(
            {
                "type": "consistency",
                "weekday": "Monday",
                "title": "Mondays Are Quiet",
                "description": "...",
                "priority": 2,
            }
        )

        assert isinstance(parsed, ConsistencySuggestion)

    def test_streak_kind_is_checked(self):
        with pytest.raises(ValidationError):
            StreakSuggestion(kind="almost_there", title="t", description="d", priority=1)
