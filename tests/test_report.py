from __future__ import annotations

import json
from datetime import date

import yaml

from ghstats.contributions import summarize_contributions
from ghstats.report import (
    contributions_report_path,
    render_contributions_markdown,
    render_stars_markdown,
    write_contributions_report,
    write_stars_report,
)
from ghstats.stars import ResourceSeries, StarsRun, merge_series

W1, W2, W3 = date(2025, 9, 1), date(2025, 9, 8), date(2025, 9, 15)


def _chart(markdown: str) -> dict:
    block = markdown.split("```chart\n", 1)[1].split("\n```", 1)[0]
    return yaml.safe_load(block)


def _frontmatter(markdown: str) -> dict:
    assert markdown.startswith("---\n")
    return yaml.safe_load(markdown.split("---\n")[1])


# ── Contributions ─────────────────────────────────────────────────────────────

def test_contributions_markdown(contributions_collection) -> None:
    md = render_contributions_markdown(summarize_contributions(contributions_collection))

    front = _frontmatter(md)
    assert front["contributions"]["commits"] == 6
    assert front["contributions"]["pull_request_reviews"] == 3
    assert front["tags"] == [
        "gh-stats/a/x", "gh-stats/b/y", "gh-stats/c/z", "gh-stats/d/w",
    ]

    assert "# Contributions for the week" in md
    assert "- **Total Commit Contributions**: 6" in md
    assert "| a/x | 0 | **5** | **1** | 0 |" in md
    rows = [line for line in md.splitlines() if line.startswith("| ") and "/" in line]
    assert [r.split(" | ")[0][2:] for r in rows] == ["a/x", "b/y", "d/w", "c/z"]


def test_contributions_report_path_uses_week_year(tmp_path) -> None:
    assert contributions_report_path(tmp_path, date(2025, 9, 8)) == tmp_path / "2025" / "2025-09-08_gh.md"
    # the week of 2025-01-01 starts in 2024
    assert contributions_report_path(tmp_path, date(2024, 12, 30)).parent.name == "2024"


def test_write_contributions_report(tmp_path, contributions_collection) -> None:
    path = write_contributions_report(
        tmp_path / "notes", date(2025, 9, 8), summarize_contributions(contributions_collection)
    )
    assert path.exists()
    assert path.read_text(encoding="utf-8").startswith("---\ncontributions:")


# ── Stargazers ────────────────────────────────────────────────────────────────

def _run(failures: dict | None = None) -> StarsRun:
    return StarsRun(
        reference_week=W3,
        series=[ResourceSeries("o/a", {W1: 1, W3: 3}), ResourceSeries("o/b", {W2: 2})],
        failures=failures or {},
    )


def test_stars_markdown_chart_block() -> None:
    run = _run()
    md = render_stars_markdown(run, merge_series(run.series))

    chart = _chart(md)
    assert chart["type"] == "line"
    assert chart["labels"] == ["2025-09-01", "2025-09-08", "2025-09-15"]
    assert chart["series"] == [
        {"title": "o/a", "data": [1, 1, 3], "pointRadius": 0, "pointHoverRadius": 0},
        {"title": "o/b", "data": [0, 2, 2], "pointRadius": 0, "pointHoverRadius": 0},
    ]


def test_stars_markdown_summary() -> None:
    run = _run({"o/gone": "Failed to fetch stargazers for o/gone"})
    md = render_stars_markdown(run, merge_series(run.series))

    assert md.startswith("# Repository Stargazers Analysis")
    assert md.index("### o/a") < md.index("### o/b")
    assert "- **Total Stars**: 3" in md
    assert "- **Data Points**: 2" in md
    assert "- **Date Range**: 2025-09-01 to 2025-09-15" in md
    assert "## Failed Repositories" in md
    assert "- **o/gone**: Failed to fetch stargazers for o/gone" in md


def test_stars_markdown_without_any_stars() -> None:
    run = StarsRun(reference_week=W3, series=[ResourceSeries("o/new")])
    md = render_stars_markdown(run, merge_series(run.series))

    chart = _chart(md)
    assert chart["labels"] == []
    assert chart["series"][0]["data"] == []
    assert "- **Total Stars**: 0" in md
    assert "- **Date Range**: n/a" in md
    assert "Failed Repositories" not in md


def test_write_stars_report(tmp_path) -> None:
    json_path, md_path = write_stars_report(tmp_path / "out", _run({"o/gone": "boom"}))

    assert md_path.name == "stargazers.md" and md_path.exists()
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["reference_week"] == "2025-09-15"
    assert [r["name"] for r in payload["repositories"]] == ["o/a", "o/b"]
    assert payload["repositories"][0]["cumulative"] == {"2025-09-01": 1, "2025-09-15": 3}
    assert payload["repositories"][0]["total"] == 3
    assert payload["repositories"][1]["first_week"] == "2025-09-08"
    assert payload["failures"] == {"o/gone": "boom"}
