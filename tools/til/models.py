"""
Data model for the TIL engine.

Entries and goals are frozen snapshots: analytics receive them, derive
values, and hand back new objects. Attribute names are snake_case; the
camelCase aliases are the storage/transport field names.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

GoalStatus = Literal["active", "completed", "paused"]

_TAG_STRIP = re.compile(r"[^a-z0-9-]")


def normalize_tags(tags: list[str] | None) -> list[str]:
    """
    Clean user-supplied tags into lowercase alphanumeric/hyphen strings.

    "#React", "react native" and "React!" become "react", "react-native"
    and "react". Empty results and duplicates are dropped; first-seen
    order is kept.
    """
    cleaned: list[str] = []
    for raw in tags or []:
        tag = raw.strip().lower().lstrip("#")
        tag = re.sub(r"\s+", "-", tag)
        tag = _TAG_STRIP.sub("", tag).strip("-")
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class LogEntry(_Snapshot):
    id: str
    content: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    source: Optional[str] = None
    source_name: Optional[str] = Field(default=None, alias="sourceName")
    goal_id: Optional[str] = Field(default=None, alias="goalId")
    created_at: str = Field(alias="createdAt")

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class Goal(_Snapshot):
    id: str
    title: str = Field(min_length=1)
    description: Optional[str] = None
    deadline: Optional[str] = None
    related_tags: list[str] = Field(default_factory=list, alias="relatedTags")
    target_entries: Optional[int] = Field(default=None, alias="targetEntries")
    status: GoalStatus = "active"
    created_at: str = Field(alias="createdAt")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


# ─────────────────────────────────────────────────────────────────────────────
# Derived values
# ─────────────────────────────────────────────────────────────────────────────


class TagCount(_Snapshot):
    tag: str
    count: int


class DayBucket(_Snapshot):
    day: date
    count: int


class WeekBucket(_Snapshot):
    label: str
    start: datetime
    end: datetime
    count: int


class MonthBucket(_Snapshot):
    month: str
    start: date
    count: int


class WeekdayCount(_Snapshot):
    day: str
    count: int


# ─────────────────────────────────────────────────────────────────────────────
# Suggestions
# ─────────────────────────────────────────────────────────────────────────────


class _SuggestionBase(_Snapshot):
    title: str
    description: str
    action: Optional[str] = None
    priority: int


class StreakSuggestion(_SuggestionBase):
    type: Literal["streak"] = "streak"
    kind: Literal["start_streak", "keep_streak", "milestone_streak"]
    streak: int = 0


class GoalSuggestion(_SuggestionBase):
    type: Literal["goal"] = "goal"
    kind: Literal["set_goal", "almost_there", "deadline_approaching"]
    goal_id: Optional[str] = None
    progress: Optional[int] = None


class ExploreSuggestion(_SuggestionBase):
    type: Literal["explore"] = "explore"
    kind: Literal["diversify"] = "diversify"
    tag: str


class ReviewSuggestion(_SuggestionBase):
    type: Literal["review"] = "review"
    kind: Literal["review"] = "review"
    entry_id: str


class ConsistencySuggestion(_SuggestionBase):
    type: Literal["consistency"] = "consistency"
    kind: Literal["consistency"] = "consistency"
    weekday: str


Suggestion = Annotated[
    Union[
        StreakSuggestion,
        GoalSuggestion,
        ExploreSuggestion,
        ReviewSuggestion,
        ConsistencySuggestion,
    ],
    Field(discriminator="type"),
]
