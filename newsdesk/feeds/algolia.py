"""Keyword feeds backed by the Hacker News Algolia search API.

Stages: relevance-ranked ``/search`` first, then ``/search_by_date`` with
the same query, then the category's demo item.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx

from newsdesk.config import settings
from newsdesk.feeds.base import FeedSource, Stage, SourceError, as_int, get_json, parse_timestamp
from newsdesk.feeds.demo import ai_demo, startup_demo
from newsdesk.feeds.models import Category, FeedItem


def score_line(points: Any, author: Any, comments: Any) -> str:
    return f"{as_int(points) or 0} points by {author or 'unknown'} | {as_int(comments) or 0} comments"


def hit_to_item(
    hit: dict[str, Any],
    *,
    prefix: str,
    source_name: str,
    category: Category,
) -> FeedItem | None:
    """Map one Algolia hit to a :class:`FeedItem`; ``None`` if unusable."""
    title = hit.get("title")
    url = hit.get("url")
    if not title or not url:
        return None
    return FeedItem(
        id=f"{prefix}-{hit.get('objectID')}",
        title=title,
        description=score_line(hit.get("points"), hit.get("author"), hit.get("num_comments")),
        url=url,
        source_name=source_name,
        category=category,
        published_at=parse_timestamp(hit.get("created_at") or hit.get("created_at_i")),
        votes=as_int(hit.get("points")),
        comments=as_int(hit.get("num_comments")),
    )


async def search_hits(
    client: httpx.AsyncClient,
    endpoint: str,
    params: dict[str, Any],
) -> list[dict[str, Any]]:
    data = await get_json(client, f"{settings.algolia_api_base}/{endpoint}", params=params)
    hits = data.get("hits") if isinstance(data, dict) else None
    if not isinstance(hits, list):
        raise SourceError(f"no hits in {endpoint} response")
    return [hit for hit in hits if isinstance(hit, dict)]


class AlgoliaSearchSource(FeedSource):
    """A category fed by a keyword query against Algolia."""

    def __init__(
        self,
        *,
        name: str,
        category: Category,
        prefix: str,
        query: Callable[[], str],
        demo: Callable[[], list[FeedItem]],
    ) -> None:
        self.name = name
        self.category = category
        self.prefix = prefix
        self._query = query
        self._demo = demo

    def stages(self) -> list[tuple[str, Stage]]:
        return [
            ("search", self._by_relevance),
            ("search_by_date", self._by_date),
        ]

    def demo_items(self) -> list[FeedItem]:
        return self._demo()

    def _params(self) -> dict[str, Any]:
        return {
            "query": self._query(),
            "tags": "story",
            "hitsPerPage": settings.feed_limit,
        }

    async def _by_relevance(self, client: httpx.AsyncClient) -> list[FeedItem]:
        return self._to_items(await search_hits(client, "search", self._params()))

    async def _by_date(self, client: httpx.AsyncClient) -> list[FeedItem]:
        return self._to_items(await search_hits(client, "search_by_date", self._params()))

    def _to_items(self, hits: list[dict[str, Any]]) -> list[FeedItem]:
        items = [
            hit_to_item(hit, prefix=self.prefix, source_name=self.name, category=self.category)
            for hit in hits
        ]
        return [item for item in items if item is not None][: settings.feed_limit]


def ai_news_source() -> AlgoliaSearchSource:
    return AlgoliaSearchSource(
        name="AI News",
        category=Category.AI,
        prefix="ai",
        query=lambda: settings.ai_news_query,
        demo=ai_demo,
    )


def startup_news_source() -> AlgoliaSearchSource:
    return AlgoliaSearchSource(
        name="Startup News",
        category=Category.STARTUP,
        prefix="startup",
        query=lambda: settings.startup_news_query,
        demo=startup_demo,
    )
