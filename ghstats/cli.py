"""
ghstats command line.

Usage:
    ghstats week [DATE]
    ghstats contributions LOGIN OUTPUT_DIR [DATE]
    ghstats stars OWNER/REPO[,OWNER/REPO…] OUTPUT_DIR [DATE]

Data is fetched through an authenticated ``gh`` CLI, or over HTTPS when
GITHUB_TOKEN is set (see --transport).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ghstats.config import TRANSPORTS, Settings
from ghstats.contributions import summarize_contributions
from ghstats.errors import FetchError, MalformedInputError
from ghstats.github import EventCache, StargazerFetcher, fetch_contributions, make_client
from ghstats.report import write_contributions_report, write_stars_report
from ghstats.stars import collect_stargazers, unique_repos
from ghstats.weeks import monday_of, next_monday

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_BAD_INPUT = 2


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ghstats",
        description="Weekly GitHub contribution and stargazer reports.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--transport", choices=TRANSPORTS,
                    help="http (needs GITHUB_TOKEN) or gh (default without a token)")
    ap.add_argument("--gh-binary", help="Path to the gh executable")
    ap.add_argument("--cache-dir", help="Cache fetched stargazers in this directory")
    ap.add_argument("--request-delay", type=float,
                    help="Pause between paginated requests (seconds)")

    sub = ap.add_subparsers(dest="command", required=True)

    week = sub.add_parser("week", help="Print the Monday of a date's week")
    week.add_argument("date", nargs="?", help="Any date (default: today)")

    contrib = sub.add_parser("contributions", help="Weekly contribution report for a user")
    contrib.add_argument("login")
    contrib.add_argument("output_dir", type=Path)
    contrib.add_argument("date", nargs="?", help="Any date inside the week (default: today)")

    stars = sub.add_parser("stars", help="Cumulative stargazer chart for repositories")
    stars.add_argument("repos", help="Comma-separated owner/repo list")
    stars.add_argument("output_dir", type=Path)
    stars.add_argument("date", nargs="?", help="Last week to include (default: this week)")

    return ap


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.from_env(
        transport=args.transport,
        gh_binary=args.gh_binary,
        cache_dir=args.cache_dir,
        request_delay=args.request_delay,
    )


# ── Commands ──────────────────────────────────────────────────────────────────

def run_week(args: argparse.Namespace) -> int:
    print(monday_of(args.date).isoformat())
    return EXIT_OK


def run_contributions(args: argparse.Namespace, settings: Settings) -> int:
    week = monday_of(args.date)
    client = make_client(settings)

    log.info(
        f"Fetching contributions for {args.login} from {week} "
        f"to {next_monday(week)} (exclusive)"
    )
    collection = fetch_contributions(client, args.login, week)
    summary = summarize_contributions(collection)
    write_contributions_report(args.output_dir, week, summary)
    return EXIT_OK


def run_stars(args: argparse.Namespace, settings: Settings) -> int:
    week = monday_of(args.date)
    repos = unique_repos(r for r in args.repos.split(",") if r.strip())
    if not repos:
        raise MalformedInputError("No repositories given")

    client = make_client(settings)
    cache = EventCache(settings.cache_dir, settings.cache_ttl) if settings.cache_dir else None
    fetcher = StargazerFetcher(
        client,
        page_size=settings.page_size,
        request_delay=settings.request_delay,
        cache=cache,
    )

    run = collect_stargazers(repos, fetcher, week)
    write_stars_report(args.output_dir, run)

    if run.failures:
        log.warning(
            f"{len(run.failures)} of {len(repos)} repositories failed: "
            f"{', '.join(run.failures)}"
        )
    return EXIT_OK


COMMANDS = {
    "contributions": run_contributions,
    "stars":         run_stars,
}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "week":
            return run_week(args)
        settings = settings_from_args(args)
        return COMMANDS[args.command](args, settings)
    except MalformedInputError as exc:
        log.error(str(exc))
        return EXIT_BAD_INPUT
    except FetchError as exc:
        log.error(str(exc))
        return EXIT_FETCH_FAILED


if __name__ == "__main__":
    sys.exit(main())
