"""Exception types shared by the CLI, fetchers and aggregation code."""

from __future__ import annotations


class GhStatsError(Exception):
    """Base class for every error raised by ghstats."""


class MalformedInputError(GhStatsError, ValueError):
    """Unparseable date, repository identifier or configuration value."""


class FetchError(GhStatsError, RuntimeError):
    """The GitHub API (or the gh CLI) could not return the requested data."""
