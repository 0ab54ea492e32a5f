"""Centralised settings for harvest.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("HARVEST_REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "HARVEST_USER_AGENT",
            "Mozilla/5.0 (compatible; harvest/0.1; +https://github.com/harvest-scraper)",
        )
    )
    follow_redirects: bool = field(
        default_factory=lambda: _env_bool("HARVEST_FOLLOW_REDIRECTS", "true")
    )

    # ------------------------------------------------------------------
    # CLI
    # ------------------------------------------------------------------
    default_url: str = field(
        default_factory=lambda: os.environ.get(
            "HARVEST_DEFAULT_URL", "https://news.ycombinator.com/"
        )
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("HARVEST_LOG_LEVEL", "WARNING")
    )


# Module-level singleton, import this everywhere:
#   from harvest.config import settings
settings = Settings()
