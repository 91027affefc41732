"""Article extraction: turns an article URL into an :class:`ArticleResult`.

``extract_article`` is the public entry point.  It never raises for fetch or
parsing problems; those surface as a result with ``failed=True``.  The only
exception it raises is :class:`InvalidUrlError` for unusable input.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from newsdesk.scraper.fetcher import FetchStrategyChain, build_default_chain
from newsdesk.scraper.locator import locate_main_content
from newsdesk.scraper.metadata import extract_metadata, hostname_of
from newsdesk.scraper.models import ArticleResult, ChainExhausted, is_failed_content
from newsdesk.scraper.sanitizer import normalize_html

logger = logging.getLogger(__name__)


class InvalidUrlError(ValueError):
    """The caller supplied a missing or unparseable article URL."""


def validate_url(url: str | None) -> str:
    """Return *url* stripped, or raise :class:`InvalidUrlError`."""
    if url is None or not str(url).strip():
        raise InvalidUrlError("URL is required")
    candidate = str(url).strip()
    try:
        parsed = urlparse(candidate)
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL: {candidate!r}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidUrlError(f"Invalid URL: {candidate!r}")
    return candidate


def extract_content(html: str) -> str:
    """Locate the main body of *html* and normalise it to readable markup."""
    raw = locate_main_content(html)
    return normalize_html(raw) if raw else ""


def has_readable_content(html: str) -> bool:
    return not is_failed_content(extract_content(html))


def assemble_article(html: str, url: str) -> ArticleResult:
    """Combine metadata and located body of *html* into one record."""
    meta = extract_metadata(html, url)
    return ArticleResult(
        title=meta.title,
        description=meta.description,
        image=meta.image,
        site_name=meta.site_name,
        content=extract_content(html),
        source_url=url,
    )


def fallback_article(
    url: str,
    title: str | None = None,
    description: str | None = None,
) -> ArticleResult:
    """The soft-failure record used when no HTML could be acquired at all."""
    return ArticleResult(
        title=title or "Article",
        description=description or "",
        image="",
        site_name=hostname_of(url),
        content="",
        source_url=url,
    )


async def extract_article(
    url: str | None,
    title: str | None = None,
    description: str | None = None,
    chain: FetchStrategyChain | None = None,
) -> ArticleResult:
    """Fetch *url* and return its readable representation.

    Args:
        url: The article to fetch.
        title: Caller-known title, used only if nothing could be fetched.
        description: Caller-known description, same rule as *title*.
        chain: Strategy chain to use; defaults to direct → proxy → archive.

    Raises:
        InvalidUrlError: If *url* is missing or not an http(s) URL.
    """
    url = validate_url(url)
    chain = chain or build_default_chain()

    try:
        outcome = await chain.fetch_html(url, accept=has_readable_content)
    except Exception:
        logger.exception("[extract] fetch chain crashed for %s", url)
        return fallback_article(url, title, description)

    if isinstance(outcome, ChainExhausted):
        if outcome.partial is None:
            return fallback_article(url, title, description)
        logger.info("[extract] %s: metadata only, from %s", url, outcome.partial.strategy.value)
        return assemble_article(outcome.partial.html, url)

    return assemble_article(outcome.html, url)
