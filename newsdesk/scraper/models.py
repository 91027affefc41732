"""Data models for the article extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from newsdesk.config import settings


class Strategy(str, Enum):
    """Acquisition strategies, in the order the chain tries them."""

    DIRECT = "direct"
    PROXY = "proxy"
    ARCHIVE = "archive"


@dataclass(frozen=True)
class FetchAttempt:
    """Outcome of one strategy run against one URL.

    ``html`` is set whenever a page was downloaded, even if it was then
    rejected by the acceptance check; ``reason`` is ``None`` on success.
    """

    strategy: Strategy
    url: str
    timeout: float
    html: str | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None and self.html is not None


@dataclass(frozen=True)
class HtmlPayload:
    """HTML acquired for a requested article URL."""

    url: str
    html: str
    fetched_from: str
    strategy: Strategy
    attempts: tuple[FetchAttempt, ...] = ()


@dataclass(frozen=True)
class ChainExhausted:
    """Sentinel returned when every strategy failed.

    ``partial`` holds the first page that downloaded fine but failed the
    acceptance check, so its metadata can still be surfaced.
    """

    url: str
    attempts: tuple[FetchAttempt, ...] = ()
    partial: HtmlPayload | None = None


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: str
    image: str
    site_name: str


@dataclass(frozen=True)
class ArticleResult:
    """The readable representation of an article page.

    ``failed`` is derived from ``content`` and cannot be passed in.
    """

    title: str
    description: str
    image: str
    site_name: str
    content: str
    source_url: str
    failed: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "failed", is_failed_content(self.content)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "siteName": self.site_name,
            "content": self.content,
            "sourceUrl": self.source_url,
            "failed": self.failed,
        }


def is_failed_content(content: str) -> bool:
    """Return ``True`` if *content* is empty or below the readable minimum."""
    return not content or len(content) < settings.min_content_length
