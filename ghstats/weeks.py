"""
Week boundary helpers.

Every week is keyed by the date of its Monday in UTC. A week covers the
half-open range [Monday 00:00Z, next Monday 00:00Z).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from ghstats.errors import MalformedInputError

DateLike = Union[date, datetime, str]

ONE_WEEK = timedelta(days=7)


def parse_date(value: DateLike) -> date:
    """Return the UTC calendar date of a date, datetime or ISO string."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise MalformedInputError(f"Invalid date: {value!r}") from exc
        return parse_date(parsed)
    raise MalformedInputError(f"Invalid date: {value!r}")


def monday_of(value: Optional[DateLike] = None) -> date:
    """Monday starting the week that contains ``value`` (today when omitted)."""
    day = parse_date(value) if value is not None else datetime.now(timezone.utc).date()
    # weekday(): Monday 0 … Sunday 6
    return day - timedelta(days=day.weekday())


def next_monday(week: date) -> date:
    return week + ONE_WEEK


def week_start(week: date) -> datetime:
    """Monday 00:00 UTC as an aware datetime."""
    return datetime.combine(week, time.min, tzinfo=timezone.utc)


def week_range(first: date, last: date) -> list[date]:
    """Contiguous Mondays from ``first`` to ``last`` inclusive."""
    weeks = []
    current = first
    while current <= last:
        weeks.append(current)
        current += ONE_WEEK
    return weeks
