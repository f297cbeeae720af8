"""Weekly contribution totals and per-repository breakdown for one user."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

# GraphQL field → column name, in first-seen order for ties
BY_REPOSITORY_FIELDS = {
    "commitContributionsByRepository":            "commits",
    "issueContributionsByRepository":             "issues",
    "pullRequestContributionsByRepository":       "prs",
    "pullRequestReviewContributionsByRepository": "reviews",
}

TOTAL_FIELDS = {
    "issues":               "totalIssueContributions",
    "commits":              "totalCommitContributions",
    "repositories":         "totalRepositoryContributions",
    "pull_requests":        "totalPullRequestContributions",
    "pull_request_reviews": "totalPullRequestReviewContributions",
}

REPO_COLUMNS = ["repository", "issues", "commits", "prs", "reviews", "total"]


@dataclass
class ContributionSummary:
    totals: dict[str, int]
    repositories: pd.DataFrame

    @property
    def repository_names(self) -> list[str]:
        return self.repositories["repository"].tolist()


def summarize_contributions(collection: dict) -> ContributionSummary:
    """
    Fold a ``contributionsCollection`` into totals and a per-repository table
    sorted by overall contributions, busiest repository first.
    """
    totals = {key: int(collection.get(field) or 0) for key, field in TOTAL_FIELDS.items()}

    per_repo: dict[str, dict[str, int]] = {}
    for field, column in BY_REPOSITORY_FIELDS.items():
        for item in collection.get(field) or []:
            name = item["repository"]["nameWithOwner"]
            row = per_repo.setdefault(name, {"issues": 0, "commits": 0, "prs": 0, "reviews": 0})
            row[column] = int(item["contributions"]["totalCount"])

    rows = [{"repository": name, **counts} for name, counts in per_repo.items()]
    df = pd.DataFrame(rows, columns=REPO_COLUMNS[:-1])
    df["total"] = df[["issues", "commits", "prs", "reviews"]].sum(axis=1).astype("int64")
    df = df.sort_values("total", ascending=False, kind="stable").reset_index(drop=True)

    return ContributionSummary(totals=totals, repositories=df)
