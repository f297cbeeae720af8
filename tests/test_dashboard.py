from __future__ import annotations

from datetime import date

from ghstats.charts import make_star_growth, make_weekly_new_stars
from ghstats.data import (
    build_series_set,
    build_summary_df,
    merge_selected,
    select_series,
    weekly_new_stars,
)

REPORT = {
    "reference_week": "2025-09-29",
    "repositories": [
        {"name": "o/a", "cumulative": {"2025-09-01": 1, "2025-09-15": 3, "2025-09-29": 7}},
        {"name": "o/b", "cumulative": {"2025-09-08": 2}},
        {"name": "o/c", "cumulative": {}},
    ],
    "failures": {},
}


def test_build_series_set_parses_weeks() -> None:
    series = build_series_set(REPORT)
    assert [s.name for s in series] == ["o/a", "o/b", "o/c"]
    assert series[0].cumulative[date(2025, 9, 15)] == 3


def test_repeated_report_entries_keep_the_first() -> None:
    report = {"repositories": [
        {"name": "o/a", "cumulative": {"2025-09-01": 1}},
        {"name": "o/a", "cumulative": {"2025-09-08": 5}},
    ]}
    series = build_series_set(report)
    assert [s.name for s in series] == ["o/a"]
    assert merge_selected(report, ["o/a"]).column("o/a") == [1]


def test_select_series_keeps_report_order() -> None:
    chosen = select_series(build_series_set(REPORT), ["o/c", "o/a"])
    assert [s.name for s in chosen] == ["o/a", "o/c"]


def test_weekly_new_stars_recovers_increments() -> None:
    merged = merge_selected(REPORT, ["o/a", "o/b"])
    weekly = weekly_new_stars(merged)
    assert weekly["o/a"].tolist() == [1, 0, 2, 0, 4]
    assert weekly["o/b"].tolist() == [0, 2, 0, 0, 0]
    assert int(weekly.sum().sum()) == 9


def test_summary_df() -> None:
    df = build_summary_df(merge_selected(REPORT, ["o/a", "o/b", "o/c"]))
    assert df["repository"].tolist() == ["o/a", "o/b", "o/c"]
    assert df["total"].tolist() == [7, 2, 0]
    assert df.loc[0, "first_week"] == date(2025, 9, 1)


def test_star_growth_chart() -> None:
    merged = merge_selected(REPORT, ["o/a", "o/b"])
    fig = make_star_growth(merged.table)
    assert [t.name for t in fig.data] == ["o/a", "o/b"]
    assert list(fig.data[0].y) == [1, 1, 3, 3, 7]

    assert make_star_growth(merged.table, log_scale=True).layout.yaxis.type == "log"


def test_weekly_chart() -> None:
    weekly = weekly_new_stars(merge_selected(REPORT, ["o/a"]))
    fig = make_weekly_new_stars(weekly, "o/a")
    assert len(fig.data) == 2          # bars + rolling average
    assert list(fig.data[0].y) == [1, 0, 2, 0, 4]

    assert len(make_weekly_new_stars(weekly, "o/unknown").data) == 0
