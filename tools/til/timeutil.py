"""
Timestamp handling for the analytics layer.

All analytics work in naive local time. Aware timestamps are converted
to the local zone first; naive ones are assumed to already be local.

Unparsable or missing timestamps map to the Unix epoch (local midnight,
1970-01-01). That keeps every function total: such entries fall outside
all recent windows, never extend a current streak, and read as "old".
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from tools.logging_config import get_logger

logger = get_logger(__name__)

EPOCH = datetime(1970, 1, 1)

ONE_DAY = timedelta(days=1)


def _to_local_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 date or datetime into naive local time (epoch on failure)."""
    if not value:
        logger.debug("timestamp_missing")
        return EPOCH
    try:
        dt = datetime.fromisoformat(value.strip())
    except (ValueError, TypeError, AttributeError):
        logger.debug("timestamp_unparsable", value=value)
        return EPOCH
    return _to_local_naive(dt)


def resolve_now(now: datetime | None = None) -> datetime:
    if now is None:
        return datetime.now()
    return _to_local_naive(now)


def local_day(value: str | None) -> date:
    return parse_timestamp(value).date()


def start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


def add_months(d: date, months: int) -> date:
    """Shift a first-of-month date by whole months."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def is_iso_timestamp(value: str | None) -> bool:
    """True when value is an ISO-8601 date or datetime that parse_timestamp accepts."""
    if not value:
        return False
    try:
        datetime.fromisoformat(value.strip())
    except (ValueError, TypeError, AttributeError):
        return False
    return True
