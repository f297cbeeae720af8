"""Loading helpers for the dashboard."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pandas as pd
import streamlit as st

from ghstats.stars import MergedSeries, ResourceSeries, merge_series

log = logging.getLogger(__name__)


@st.cache_data(ttl=300)
def load_stars_report(path: str) -> dict:
    p = Path(path)
    if not p.exists():
        st.error(f"'{path}' not found. Run `ghstats stars <repos> <output_dir>` first.")
        st.stop()
    with p.open(encoding="utf-8") as f:
        return json.load(f)


def build_series_set(report: dict) -> list[ResourceSeries]:
    """One series per repository; a repeated name keeps its first entry."""
    series_set: list[ResourceSeries] = []
    seen: set[str] = set()
    for repo in report.get("repositories", []):
        name = repo["name"]
        if name in seen:
            log.warning(f"Repository {name} appears more than once in the report, keeping the first")
            continue
        seen.add(name)
        series_set.append(ResourceSeries(
            name=name,
            cumulative={
                date.fromisoformat(week): int(count)
                for week, count in repo.get("cumulative", {}).items()
            },
        ))
    return series_set


def select_series(series_set: list[ResourceSeries], names: list[str]) -> list[ResourceSeries]:
    """Keep the chosen repositories in report order."""
    wanted = set(names)
    return [s for s in series_set if s.name in wanted]


def build_summary_df(merged: MergedSeries) -> pd.DataFrame:
    rows = []
    for s in merged.summaries:
        rows.append({
            "repository":  s.name,
            "total":       s.total,
            "data_points": s.data_points,
            "first_week":  s.first_week,
            "last_week":   s.last_week,
        })
    return pd.DataFrame(rows, columns=["repository", "total", "data_points", "first_week", "last_week"])


def weekly_new_stars(merged: MergedSeries) -> pd.DataFrame:
    """Per-week increments recovered from the running totals."""
    return merged.table.diff().fillna(merged.table).astype("int64")


def merge_selected(report: dict, names: list[str]) -> MergedSeries:
    return merge_series(select_series(build_series_set(report), names))
