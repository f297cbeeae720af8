from __future__ import annotations

from ghstats.contributions import summarize_contributions


def test_totals(contributions_collection) -> None:
    summary = summarize_contributions(contributions_collection)
    assert summary.totals == {
        "issues": 3,
        "commits": 6,
        "repositories": 0,
        "pull_requests": 1,
        "pull_request_reviews": 3,
    }


def test_repositories_sorted_by_total_with_stable_ties(contributions_collection) -> None:
    df = summarize_contributions(contributions_collection).repositories

    # b/y and d/w both total 3; b/y was seen first
    assert df["repository"].tolist() == ["a/x", "b/y", "d/w", "c/z"]
    assert df["total"].tolist() == [6, 3, 3, 1]

    row = df.iloc[0]
    assert (row.issues, row.commits, row.prs, row.reviews) == (0, 5, 1, 0)


def test_empty_collection() -> None:
    summary = summarize_contributions({})
    assert summary.repository_names == []
    assert set(summary.totals.values()) == {0}
