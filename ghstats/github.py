"""
GitHub GraphQL access.

Two interchangeable clients execute queries: one talks HTTPS with a token,
the other shells out to an authenticated ``gh`` CLI. Fetchers on top of them
page through connections and hand plain records to the aggregation code.
"""

from __future__ import annotations

import json
import logging
import subprocess
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

import requests

from ghstats.config import (
    GITHUB_GRAPHQL_URL,
    PAGE_SIZE,
    REQUEST_DELAY,
    REQUEST_TIMEOUT,
    Settings,
)
from ghstats.errors import FetchError, MalformedInputError
from ghstats.weeks import next_monday, week_start

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimestampedEvent:
    """A single star (or commit) at a point in time."""

    occurred_at: datetime
    payload: Optional[str] = None

    def __post_init__(self) -> None:
        # naive timestamps are UTC
        if self.occurred_at.tzinfo is None:
            object.__setattr__(self, "occurred_at", self.occurred_at.replace(tzinfo=timezone.utc))


def parse_dt(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


# ─────────────────────────────────────────────────────────────────────────────
# GraphQL clients
# ─────────────────────────────────────────────────────────────────────────────

class GraphQLClient(Protocol):
    def execute(self, query: str, variables: dict) -> dict: ...


def _unwrap(payload: dict) -> dict:
    if payload.get("errors"):
        raise FetchError(f"GraphQL errors: {payload['errors']}")
    return payload.get("data") or {}


class HttpGraphQLClient:
    """Execute queries against api.github.com with a bearer token."""

    def __init__(self, token: str, url: str = GITHUB_GRAPHQL_URL,
                 session: Optional[requests.Session] = None) -> None:
        self.token = token
        self.url = url
        self.session = session or requests.Session()

    def execute(self, query: str, variables: dict) -> dict:
        try:
            resp = self.session.post(
                self.url,
                json={"query": query, "variables": variables},
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise FetchError(f"GitHub request failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"Failed to parse GraphQL response: {exc}") from exc
        return _unwrap(payload)


class GhCliGraphQLClient:
    """Execute queries through ``gh api graphql`` (reuses the gh login)."""

    def __init__(self, binary: str = "gh") -> None:
        self.binary = binary

    def build_args(self, query: str, variables: dict) -> list[str]:
        args = [self.binary, "api", "graphql", "-f", f"query={query}"]
        for key, value in variables.items():
            if value is None:
                continue
            # -F converts numbers and booleans, -f passes strings verbatim
            if isinstance(value, bool):
                args += ["-F", f"{key}={str(value).lower()}"]
            elif isinstance(value, int):
                args += ["-F", f"{key}={value}"]
            else:
                args += ["-f", f"{key}={value}"]
        return args

    def execute(self, query: str, variables: dict) -> dict:
        args = self.build_args(query, variables)
        try:
            proc = subprocess.run(args, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise FetchError(f"Could not run {self.binary}: {exc}") from exc

        if proc.returncode != 0:
            raise FetchError(
                f"GraphQL query failed ({proc.returncode}): {proc.stderr.strip()}"
            )
        try:
            payload = json.loads(proc.stdout)
        except json.JSONDecodeError as exc:
            log.debug(f"Raw output: {proc.stdout!r}")
            raise FetchError(f"Failed to parse GraphQL response: {exc}") from exc
        return _unwrap(payload)


def make_client(settings: Settings) -> GraphQLClient:
    if settings.transport == "http":
        if not settings.token:
            raise MalformedInputError(
                "GITHUB_TOKEN (or GH_TOKEN) is required for the http transport. "
                "Set it or use --transport gh."
            )
        return HttpGraphQLClient(settings.token)
    if settings.transport == "gh":
        return GhCliGraphQLClient(settings.gh_binary)
    raise MalformedInputError(f"Unknown transport: {settings.transport!r}")


# ─────────────────────────────────────────────────────────────────────────────
# Cache helpers
# ─────────────────────────────────────────────────────────────────────────────

class EventCache:
    """JSON files of fetched timestamps, one per repository, with a TTL."""

    def __init__(self, directory: Path, ttl: float) -> None:
        self.directory = Path(directory)
        self.ttl = ttl

    def path(self, key: str) -> Path:
        return self.directory / f"{key.replace('/', '__')}.json"

    def load(self, key: str) -> Optional[list[TimestampedEvent]]:
        p = self.path(key)
        if not p.exists():
            return None
        age = time.time() - p.stat().st_mtime
        if age > self.ttl:
            log.info(f"Cache expired for '{key}' (age={age/3600:.1f}h)")
            return None
        try:
            with p.open() as f:
                rows = json.load(f)
            return [TimestampedEvent(parse_dt(r["at"]), r.get("payload")) for r in rows]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            log.warning(f"Ignoring unreadable cache for '{key}': {exc}")
            return None

    def save(self, key: str, events: list[TimestampedEvent]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        rows = [{"at": e.occurred_at.isoformat(), "payload": e.payload} for e in events]
        with self.path(key).open("w") as f:
            json.dump(rows, f)


# ─────────────────────────────────────────────────────────────────────────────
# GraphQL queries
# ─────────────────────────────────────────────────────────────────────────────

STARGAZERS_QUERY = """
query Stargazers($owner: String!, $name: String!, $first: Int!, $after: String) {
  repository(owner: $owner, name: $name) {
    stargazers(first: $first, after: $after, orderBy: {field: STARRED_AT, direction: ASC}) {
      pageInfo { hasNextPage endCursor }
      edges {
        starredAt
        node { login }
      }
    }
  }
}
"""

_BY_REPO = "repository { nameWithOwner } contributions { totalCount }"

CONTRIBUTIONS_QUERY = f"""
query Contributions($login: String!, $from: DateTime!, $to: DateTime!) {{
  user(login: $login) {{
    contributionsCollection(from: $from, to: $to) {{
      totalIssueContributions
      totalCommitContributions
      totalRepositoryContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      commitContributionsByRepository(maxRepositories: 100) {{ {_BY_REPO} }}
      issueContributionsByRepository(maxRepositories: 100) {{ {_BY_REPO} }}
      pullRequestContributionsByRepository(maxRepositories: 100) {{ {_BY_REPO} }}
      pullRequestReviewContributionsByRepository(maxRepositories: 100) {{ {_BY_REPO} }}
    }}
  }}
}}
"""


# ─────────────────────────────────────────────────────────────────────────────
# Data fetching
# ─────────────────────────────────────────────────────────────────────────────

class EventFetcher(Protocol):
    def fetch_events(self, resource: str) -> list[TimestampedEvent]: ...


def parse_repo(value: str) -> tuple[str, str]:
    """Split ``owner/name``; anything else is malformed."""
    parts = value.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedInputError(
            f"Invalid repository format: {value!r}. Expected format: owner/repo"
        )
    return parts[0], parts[1]


class StargazerFetcher:
    """Page through ``repository.stargazers`` and yield one event per star."""

    def __init__(
        self,
        client: GraphQLClient,
        page_size: int = PAGE_SIZE,
        request_delay: float = REQUEST_DELAY,
        cache: Optional[EventCache] = None,
    ) -> None:
        self.client = client
        self.page_size = page_size
        self.request_delay = request_delay
        self.cache = cache

    def fetch_events(self, resource: str) -> list[TimestampedEvent]:
        owner, name = parse_repo(resource)
        repo = f"{owner}/{name}"

        if self.cache is not None:
            cached = self.cache.load(repo)
            if cached is not None:
                log.info(f"Loaded {len(cached)} stargazers for {repo} from cache")
                return cached

        log.info(f"Fetching stargazers for {repo}…")
        events: list[TimestampedEvent] = []
        after: Optional[str] = None
        page = 0

        while True:
            page += 1
            data = self.client.execute(
                STARGAZERS_QUERY,
                {"owner": owner, "name": name, "first": self.page_size, "after": after},
            )
            stargazers = (data.get("repository") or {}).get("stargazers")
            if stargazers is None:
                raise FetchError(f"Failed to fetch stargazers for {repo}")

            for edge in stargazers.get("edges") or []:
                if edge and edge.get("starredAt"):
                    login = (edge.get("node") or {}).get("login")
                    try:
                        starred_at = parse_dt(edge["starredAt"])
                    except (TypeError, ValueError) as exc:
                        raise FetchError(f"Malformed starredAt for {repo}: {exc}") from exc
                    events.append(TimestampedEvent(starred_at, login))
            log.debug(f"  page {page}: {len(events)} stargazers so far")

            page_info = stargazers.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            after = page_info.get("endCursor")
            if self.request_delay:
                time.sleep(self.request_delay)

        log.info(f"Total stargazers fetched for {repo}: {len(events)}")
        if self.cache is not None:
            self.cache.save(repo, events)
        return events


def fetch_contributions(client: GraphQLClient, login: str, week: date) -> dict:
    """Return the ``contributionsCollection`` of ``login`` for one week."""
    start = week_start(week)
    end = week_start(next_monday(week))
    data = client.execute(
        CONTRIBUTIONS_QUERY,
        {
            "login": login,
            "from": start.isoformat().replace("+00:00", "Z"),
            "to": end.isoformat().replace("+00:00", "Z"),
        },
    )
    user = data.get("user")
    if not user:
        raise FetchError(f"Failed to fetch user data for {login}")
    return user["contributionsCollection"]
