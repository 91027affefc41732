"""Fan-in of the four category feeds into one :class:`AggregatedFeedSet`.

Sources run concurrently and independently; the aggregator waits for all of
them.  A source that raises despite its own fallback chain is replaced by
its demo dataset, so one bad upstream never blocks or empties another
category.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from newsdesk.feeds.algolia import ai_news_source, startup_news_source
from newsdesk.feeds.base import FeedSource
from newsdesk.feeds.hackernews import HackerNewsSource
from newsdesk.feeds.models import AggregatedFeedSet, Category, FeedItem, utcnow
from newsdesk.feeds.producthunt import ProductHuntSource

logger = logging.getLogger(__name__)


def default_sources() -> list[FeedSource]:
    """Product Hunt, Hacker News, AI news and startup news."""
    return [
        ProductHuntSource(),
        HackerNewsSource(),
        ai_news_source(),
        startup_news_source(),
    ]


async def _gather(
    sources: list[FeedSource],
    client: httpx.AsyncClient,
) -> dict[Category, list[FeedItem]]:
    results = await asyncio.gather(
        *(source.fetch(client) for source in sources),
        return_exceptions=True,
    )

    per_category: dict[Category, list[FeedItem]] = {}
    for source, result in zip(sources, results):
        if isinstance(result, BaseException) or not result:
            if isinstance(result, BaseException):
                logger.error("[aggregate] %s crashed: %r", source.name, result)
            result = source.demo_items()
        per_category[source.category] = list(result)
    return per_category


async def aggregate(
    sources: list[FeedSource] | None = None,
    client: httpx.AsyncClient | None = None,
) -> AggregatedFeedSet:
    """Fetch every source concurrently and merge the results.

    Args:
        sources: Feed sources to run; defaults to :func:`default_sources`.
        client: Shared HTTP client; a fresh one is opened if omitted.
    """
    sources = sources if sources is not None else default_sources()

    if client is not None:
        per_category = await _gather(sources, client)
    else:
        async with httpx.AsyncClient(follow_redirects=True) as own_client:
            per_category = await _gather(sources, own_client)

    return AggregatedFeedSet(per_category=per_category, last_updated=utcnow())
