"""Shared constants and runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
PAGE_SIZE      = 100
REQUEST_DELAY  = 0.2            # seconds between paginated requests
REQUEST_TIMEOUT = 60
CACHE_TTL      = 3600 * 4       # 4 hours
TRANSPORTS     = ("http", "gh")

STARS_JSON     = "stargazers.json"
STARS_MARKDOWN = "stargazers.md"
TAG_PREFIX     = "gh-stats"

COLOR_STARS  = "#F77F00"
COLOR_WEEKLY = "#4361EE"


@dataclass(frozen=True)
class Settings:
    token: Optional[str] = field(default=None, repr=False)
    transport: str = "gh"
    gh_binary: str = "gh"
    cache_dir: Optional[Path] = None
    cache_ttl: int = CACHE_TTL
    request_delay: float = REQUEST_DELAY
    page_size: int = PAGE_SIZE

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Build settings from the environment, then apply non-None overrides.

        The token comes from GITHUB_TOKEN or GH_TOKEN. Without an explicit
        transport, ``http`` is used when a token is available and the
        authenticated ``gh`` CLI otherwise.
        """
        token = (
            os.environ.get("GITHUB_TOKEN", "").strip()
            or os.environ.get("GH_TOKEN", "").strip()
            or None
        )
        settings = cls(token=token, transport="http" if token else "gh")
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if "cache_dir" in overrides:
            overrides["cache_dir"] = Path(overrides["cache_dir"])
        return replace(settings, **overrides)
