from __future__ import annotations

import pytest


def _by_repo(counts: dict[str, int]) -> list[dict]:
    return [
        {"repository": {"nameWithOwner": name}, "contributions": {"totalCount": n}}
        for name, n in counts.items()
    ]


@pytest.fixture
def contributions_collection() -> dict:
    return {
        "totalIssueContributions": 3,
        "totalCommitContributions": 6,
        "totalRepositoryContributions": 0,
        "totalPullRequestContributions": 1,
        "totalPullRequestReviewContributions": 3,
        "commitContributionsByRepository": _by_repo({"a/x": 5, "b/y": 1}),
        "issueContributionsByRepository": _by_repo({"b/y": 2, "c/z": 1}),
        "pullRequestContributionsByRepository": _by_repo({"a/x": 1}),
        "pullRequestReviewContributionsByRepository": _by_repo({"d/w": 3}),
    }
