"""Scraper package — resilient article fetch & readable-content extraction."""

from newsdesk.scraper.extractor import InvalidUrlError, assemble_article, extract_article
from newsdesk.scraper.fetcher import build_default_chain, fetch_html
from newsdesk.scraper.models import ArticleResult, ChainExhausted, HtmlPayload

__all__ = [
    "extract_article",
    "assemble_article",
    "fetch_html",
    "build_default_chain",
    "InvalidUrlError",
    "ArticleResult",
    "HtmlPayload",
    "ChainExhausted",
]
