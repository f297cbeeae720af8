"""
Stargazer growth:
  - cumulative weekly star counts for one repository
  - merging several repositories onto one contiguous weekly axis
  - the fetch → aggregate loop with per-repository failure isolation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from ghstats.errors import FetchError, MalformedInputError
from ghstats.github import EventFetcher, TimestampedEvent, parse_repo
from ghstats.weeks import DateLike, monday_of, next_monday, week_range, week_start

log = logging.getLogger(__name__)


@dataclass
class ResourceSeries:
    name: str
    cumulative: dict[date, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SeriesSummary:
    name: str
    total: int
    first_week: Optional[date]
    last_week: Optional[date]
    data_points: int


@dataclass
class MergedSeries:
    """Shared week axis, one running-total column per repository."""

    weeks: list[date]
    table: pd.DataFrame
    summaries: list[SeriesSummary]

    def column(self, name: str) -> list[int]:
        return [int(v) for v in self.table[name].tolist()]


@dataclass
class StarsRun:
    reference_week: date
    series: list[ResourceSeries]
    failures: dict[str, str] = field(default_factory=dict)


# ── Aggregation ───────────────────────────────────────────────────────────────

def cumulative_series(
    events: Iterable[TimestampedEvent],
    reference_week: Optional[DateLike] = None,
) -> dict[date, int]:
    """
    Weekly cumulative counts up to and including ``reference_week``.

    Events at or after the Monday following the reference week are dropped.
    Only weeks with at least one event get a key; each value is the running
    total after the last event of that week.
    """
    upper = week_start(next_monday(monday_of(reference_week)))
    kept = sorted(
        (e for e in events if e.occurred_at < upper),
        key=lambda e: e.occurred_at,
    )

    cumulative: dict[date, int] = {}
    total = 0
    for event in kept:
        total += 1
        cumulative[monday_of(event.occurred_at)] = total
    return cumulative


# ── Merging ───────────────────────────────────────────────────────────────────

def _weekly_deltas(cumulative: dict[date, int]) -> dict[date, int]:
    deltas = {}
    prev = 0
    for week in sorted(cumulative):
        deltas[week] = cumulative[week] - prev
        prev = cumulative[week]
    return deltas


def summarize(series: ResourceSeries) -> SeriesSummary:
    weeks = sorted(series.cumulative)
    return SeriesSummary(
        name=series.name,
        total=series.cumulative[weeks[-1]] if weeks else 0,
        first_week=weeks[0] if weeks else None,
        last_week=weeks[-1] if weeks else None,
        data_points=len(weeks),
    )


def merge_series(series_set: list[ResourceSeries]) -> MergedSeries:
    """
    Align every series on the contiguous weeks between the earliest and the
    latest populated week, forward-filling weeks without new events.
    """
    seen: set[str] = set()
    for s in series_set:
        if s.name in seen:
            raise MalformedInputError(f"Repository {s.name} appears more than once")
        seen.add(s.name)

    all_weeks = {w for s in series_set for w in s.cumulative}
    weeks = week_range(min(all_weeks), max(all_weeks)) if all_weeks else []

    columns = {}
    for s in series_set:
        deltas = pd.Series(_weekly_deltas(s.cumulative), dtype="int64")
        columns[s.name] = deltas.reindex(weeks, fill_value=0).cumsum()

    table = pd.DataFrame(columns, index=pd.Index(weeks, name="week"))
    table = table.reindex(columns=[s.name for s in series_set]).astype("int64")

    return MergedSeries(
        weeks=weeks,
        table=table,
        summaries=[summarize(s) for s in series_set],
    )


# ── Pipeline ──────────────────────────────────────────────────────────────────

def unique_repos(repos: Iterable[str]) -> list[str]:
    """Validate identifiers and drop repeats, keeping first-seen order."""
    seen: dict[str, None] = {}
    for raw in repos:
        owner, name = parse_repo(raw)
        key = f"{owner}/{name}"
        if key in seen:
            log.warning(f"Repository {key} listed more than once, using it once")
            continue
        seen[key] = None
    return list(seen)


def collect_stargazers(
    repos: Iterable[str],
    fetcher: EventFetcher,
    reference_week: Optional[DateLike] = None,
) -> StarsRun:
    """Fetch and aggregate each repository; a failed fetch skips only that repo."""
    week = monday_of(reference_week)
    names = unique_repos(repos)
    run = StarsRun(reference_week=week, series=[])

    log.info(f"Processing {len(names)} repositories through week of {week}")
    for name in names:
        try:
            events = fetcher.fetch_events(name)
        except FetchError as exc:
            log.error(f"Error processing repository {name}: {exc}")
            run.failures[name] = str(exc)
            continue

        cumulative = cumulative_series(events, week)
        kept = max(cumulative.values(), default=0)
        if kept != len(events):
            log.info(f"Filtered {len(events)} stargazers to {kept} (before {next_monday(week)})")
        run.series.append(ResourceSeries(name=name, cumulative=cumulative))
        log.info(f"Updated data for {name}")

    return run
