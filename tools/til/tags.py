"""
Tool: Tag Aggregator
Purpose: Rank tags by how often they appear across entries

Tags are compared exactly as stored. Ties keep the order in which each
tag was first seen while scanning the entries.
"""

from __future__ import annotations

from collections.abc import Iterable

from tools.til.models import LogEntry, TagCount


def tag_counts(entries: Iterable[LogEntry]) -> dict[str, int]:
    # dict preserves first-encounter order
    counts: dict[str, int] = {}
    for entry in entries:
        for tag in entry.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return counts


def top_tags(entries: Iterable[LogEntry], limit: int = 5) -> list[TagCount]:
    if limit <= 0:
        return []
    counts = tag_counts(entries)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [TagCount(tag=tag, count=count) for tag, count in ranked[:limit]]
