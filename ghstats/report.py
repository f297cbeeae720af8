"""Markdown / JSON writers for the contributions and stargazer reports."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import yaml

from ghstats.config import STARS_JSON, STARS_MARKDOWN, TAG_PREFIX
from ghstats.contributions import ContributionSummary
from ghstats.stars import MergedSeries, StarsRun, merge_series

log = logging.getLogger(__name__)


def _yaml(data: dict, flow_leaves: bool = False) -> str:
    return yaml.safe_dump(
        data,
        sort_keys=False,
        default_flow_style=None if flow_leaves else False,
        allow_unicode=True,
        width=4096,
    )


def _bold(n: int) -> str:
    return f"**{n}**" if n > 0 else "0"


# ── Contributions ─────────────────────────────────────────────────────────────

def render_contributions_markdown(summary: ContributionSummary) -> str:
    t = summary.totals
    frontmatter = _yaml({
        "contributions": dict(t),
        "tags": sorted(f"{TAG_PREFIX}/{name}" for name in summary.repository_names),
    })

    lines = [
        "---",
        frontmatter.rstrip("\n"),
        "---",
        "# Contributions for the week",
        "",
        f"- **Total Issue Contributions**: {t['issues']}",
        f"- **Total Commit Contributions**: {t['commits']}",
        f"- **Total Repository Contributions**: {t['repositories']}",
        f"- **Total Pull Request Contributions**: {t['pull_requests']}",
        f"- **Total Pull Request Review Contributions**: {t['pull_request_reviews']}",
        "",
        "### Contributions by Repository",
        "",
        "| Repository | Issues | Commits | PRs | PR Reviews |",
        "|------------|--------|---------|-----|------------|",
    ]
    for row in summary.repositories.itertuples(index=False):
        lines.append(
            f"| {row.repository} | {_bold(row.issues)} | {_bold(row.commits)} "
            f"| {_bold(row.prs)} | {_bold(row.reviews)} |"
        )
    return "\n".join(lines) + "\n"


def contributions_report_path(output_dir: Path, week: date) -> Path:
    return Path(output_dir) / str(week.year) / f"{week.isoformat()}_gh.md"


def write_contributions_report(
    output_dir: Path, week: date, summary: ContributionSummary
) -> Path:
    path = contributions_report_path(output_dir, week)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_contributions_markdown(summary), encoding="utf-8")
    log.info(f"Generated contribution report: {path}")
    return path


# ── Stargazers ────────────────────────────────────────────────────────────────

def stars_payload(run: StarsRun, merged: MergedSeries) -> dict:
    repositories = []
    for s, summary in zip(run.series, merged.summaries):
        repositories.append({
            "name":       s.name,
            "total":      summary.total,
            "first_week": summary.first_week.isoformat() if summary.first_week else None,
            "last_week":  summary.last_week.isoformat() if summary.last_week else None,
            "cumulative": {w.isoformat(): n for w, n in sorted(s.cumulative.items())},
        })
    return {
        "reference_week": run.reference_week.isoformat(),
        "repositories":   repositories,
        "failures":       dict(run.failures),
    }


def render_chart_yaml(merged: MergedSeries) -> str:
    chart = {
        "type": "line",
        "labels": [w.isoformat() for w in merged.weeks],
        "series": [
            {
                "title": summary.name,
                "data": merged.column(summary.name),
                "pointRadius": 0,
                "pointHoverRadius": 0,
            }
            for summary in merged.summaries
        ],
    }
    return _yaml(chart, flow_leaves=True)


def render_stars_markdown(run: StarsRun, merged: MergedSeries) -> str:
    content = [
        "# Repository Stargazers Analysis",
        "",
        "## Chart",
        "",
        "```chart",
        render_chart_yaml(merged).rstrip("\n"),
        "```",
        "",
        "## Summary",
        "",
    ]
    for summary in merged.summaries:
        if summary.first_week:
            date_range = f"{summary.first_week} to {summary.last_week}"
        else:
            date_range = "n/a"
        content += [
            f"### {summary.name}",
            f"- **Total Stars**: {summary.total}",
            f"- **Data Points**: {summary.data_points}",
            f"- **Date Range**: {date_range}",
            "",
        ]

    if run.failures:
        content += ["## Failed Repositories", ""]
        content += [f"- **{name}**: {reason}" for name, reason in run.failures.items()]
        content.append("")

    return "\n".join(content)


def write_stars_report(output_dir: Path, run: StarsRun) -> tuple[Path, Path]:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    merged = merge_series(run.series)

    json_path = output_dir / STARS_JSON
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(stars_payload(run, merged), f, indent=2)
    log.info(f"Stargazer data updated: {json_path}")

    md_path = output_dir / STARS_MARKDOWN
    md_path.write_text(render_stars_markdown(run, merged), encoding="utf-8")
    log.info(f"Generated charts markdown: {md_path}")

    return json_path, md_path
