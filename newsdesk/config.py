"""Centralised settings for the newsdesk backend.

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

DEFAULT_PROXY_TEMPLATES = (
    "https://api.allorigins.win/raw?url={url}",
    "https://corsproxy.io/?{url}",
)

_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/121.0.0.0 Safari/537.36"
)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def parse_proxy_templates(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated template list, keeping entries with ``{url}``.

    ``None`` means "not configured" and yields the defaults; an explicitly
    empty string disables the proxy stage altogether.
    """
    if raw is None:
        return DEFAULT_PROXY_TEMPLATES
    templates = [
        item.strip() for item in raw.split(",") if "{url}" in item
    ]
    return tuple(templates)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetch strategy chain
    # ------------------------------------------------------------------
    direct_fetch_timeout: float = field(
        default_factory=lambda: _env_float("DIRECT_FETCH_TIMEOUT", 10.0)
    )
    proxy_fetch_timeout: float = field(
        default_factory=lambda: _env_float("PROXY_FETCH_TIMEOUT", 10.0)
    )
    archive_lookup_timeout: float = field(
        default_factory=lambda: _env_float("ARCHIVE_LOOKUP_TIMEOUT", 5.0)
    )
    browser_user_agent: str = field(
        default_factory=lambda: os.environ.get("BROWSER_USER_AGENT", _CHROME_UA)
    )
    proxy_templates: tuple[str, ...] = field(
        default_factory=lambda: parse_proxy_templates(os.environ.get("PROXY_TEMPLATES"))
    )
    archive_api_url: str = field(
        default_factory=lambda: os.environ.get(
            "ARCHIVE_API_URL", "https://archive.org/wayback/available"
        )
    )

    # ------------------------------------------------------------------
    # Extraction thresholds
    # ------------------------------------------------------------------
    min_html_length: int = field(
        default_factory=lambda: _env_int("MIN_HTML_LENGTH", 500)
    )
    min_content_length: int = field(
        default_factory=lambda: _env_int("MIN_CONTENT_LENGTH", 50)
    )
    min_class_match_length: int = field(
        default_factory=lambda: _env_int("MIN_CLASS_MATCH_LENGTH", 200)
    )
    min_paragraph_length: int = field(
        default_factory=lambda: _env_int("MIN_PARAGRAPH_LENGTH", 100)
    )
    min_line_length: int = field(
        default_factory=lambda: _env_int("MIN_LINE_LENGTH", 30)
    )

    # ------------------------------------------------------------------
    # Feed sources
    # ------------------------------------------------------------------
    feed_timeout: float = field(
        default_factory=lambda: _env_float("FEED_TIMEOUT", 10.0)
    )
    feed_limit: int = field(
        default_factory=lambda: _env_int("FEED_LIMIT", 15)
    )
    hn_api_base: str = field(
        default_factory=lambda: os.environ.get(
            "HN_API_BASE", "https://hacker-news.firebaseio.com/v0"
        )
    )
    algolia_api_base: str = field(
        default_factory=lambda: os.environ.get(
            "ALGOLIA_API_BASE", "https://hn.algolia.com/api/v1"
        )
    )
    producthunt_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "PRODUCTHUNT_BASE_URL", "https://www.producthunt.com"
        )
    )
    ai_news_query: str = field(
        default_factory=lambda: os.environ.get(
            "AI_NEWS_QUERY",
            "AI OR GPT OR LLM OR machine learning OR Claude OR OpenAI",
        )
    )
    startup_news_query: str = field(
        default_factory=lambda: os.environ.get(
            "STARTUP_NEWS_QUERY",
            "startup OR funding OR YC OR Series A OR seed round",
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from newsdesk.config import settings
settings = Settings()
