"""Hacker News front page (category ``tech``).

The primary stage reads the Firebase top-stories list and then fetches each
story concurrently; a story that fails to load is skipped rather than
failing the batch.  The alternate stage asks Algolia for the front page.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from newsdesk.config import settings
from newsdesk.feeds.algolia import hit_to_item, score_line, search_hits
from newsdesk.feeds.base import FeedSource, Stage, SourceError, as_int, get_json, parse_timestamp
from newsdesk.feeds.demo import tech_demo
from newsdesk.feeds.models import Category, FeedItem

logger = logging.getLogger(__name__)


class HackerNewsSource(FeedSource):
    name = "Hacker News"
    category = Category.TECH

    def stages(self) -> list[tuple[str, Stage]]:
        return [
            ("topstories", self._top_stories),
            ("algolia front_page", self._front_page),
        ]

    def demo_items(self) -> list[FeedItem]:
        return tech_demo()

    async def _top_stories(self, client: httpx.AsyncClient) -> list[FeedItem]:
        ids = await get_json(client, f"{settings.hn_api_base}/topstories.json")
        if not isinstance(ids, list):
            raise SourceError("top stories response is not a list")

        top_ids = ids[: settings.feed_limit]
        stories = await asyncio.gather(
            *(self._story(client, story_id) for story_id in top_ids),
            return_exceptions=True,
        )

        items: list[FeedItem] = []
        for story_id, story in zip(top_ids, stories):
            if isinstance(story, BaseException):
                logger.warning("[%s] story %s failed: %s", self.name, story_id, story)
                continue
            item = self._story_to_item(story)
            if item is not None:
                items.append(item)
        return items

    async def _story(self, client: httpx.AsyncClient, story_id: Any) -> Any:
        return await get_json(client, f"{settings.hn_api_base}/item/{story_id}.json")

    def _story_to_item(self, story: Any) -> FeedItem | None:
        if not isinstance(story, dict) or not story.get("title") or not story.get("url"):
            return None
        comments = as_int(story.get("descendants")) or 0
        return FeedItem(
            id=f"hn-{story.get('id')}",
            title=story["title"],
            description=score_line(story.get("score"), story.get("by"), comments),
            url=story["url"],
            source_name=self.name,
            category=self.category,
            published_at=parse_timestamp(story.get("time")),
            votes=as_int(story.get("score")),
            comments=comments,
        )

    async def _front_page(self, client: httpx.AsyncClient) -> list[FeedItem]:
        hits = await search_hits(
            client,
            "search",
            {"tags": "front_page", "hitsPerPage": settings.feed_limit},
        )
        items = [
            hit_to_item(hit, prefix="hn", source_name=self.name, category=self.category)
            for hit in hits
        ]
        return [item for item in items if item is not None]
