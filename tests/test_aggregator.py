"""Tests for the concurrent feed aggregator."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from newsdesk.feeds.aggregator import aggregate, default_sources
from newsdesk.feeds.base import FeedSource, SourceError
from newsdesk.feeds.models import AggregatedFeedSet, Category, FeedItem


def _item(category: Category, n: int) -> FeedItem:
    return FeedItem(
        id=f"{category.value}-live-{n}",
        title=f"Live {category.value} {n}",
        description="",
        url=f"https://example.com/{category.value}/{n}",
        source_name=category.value,
        category=category,
    )


class _StubSource(FeedSource):
    """A source whose single stage is a coroutine supplied by the test."""

    def __init__(self, category: Category, stage) -> None:
        self.name = f"stub-{category.value}"
        self.category = category
        self._stage = stage

    def stages(self):
        return [("stub", self._stage)]

    def demo_items(self) -> list[FeedItem]:
        return [
            FeedItem(
                id=f"{self.category.value}-demo",
                title="Demo",
                description="",
                url="https://example.com/demo",
                source_name=self.name,
                category=self.category,
            )
        ]


class _CrashingSource(_StubSource):
    async def fetch(self, client):
        raise RuntimeError("fetch blew up outside the stage loop")


async def _failing_stage(client):
    raise SourceError("upstream down")


def _live_stage(category: Category):
    async def stage(client):
        return [_item(category, 1), _item(category, 2)]

    return stage


class TestAggregate:
    async def test_partial_failure_still_fills_every_category(self) -> None:
        sources = [
            _StubSource(Category.PRODUCTHUNT, _failing_stage),
            _StubSource(Category.TECH, _live_stage(Category.TECH)),
            _StubSource(Category.AI, _failing_stage),
            _StubSource(Category.STARTUP, _failing_stage),
        ]
        feed_set = await aggregate(sources, client=AsyncMock())

        assert isinstance(feed_set, AggregatedFeedSet)
        for category in Category:
            assert feed_set.items(category), category
        assert [item.id for item in feed_set.items(Category.TECH)] == ["tech-live-1", "tech-live-2"]
        assert [item.id for item in feed_set.items(Category.AI)] == ["ai-demo"]

    async def test_crashing_source_replaced_by_demo(self) -> None:
        sources = [
            _CrashingSource(Category.PRODUCTHUNT, _failing_stage),
            _StubSource(Category.TECH, _live_stage(Category.TECH)),
        ]
        feed_set = await aggregate(sources, client=AsyncMock())

        assert [item.id for item in feed_set.items(Category.PRODUCTHUNT)] == ["producthunt-demo"]
        assert len(feed_set.items(Category.TECH)) == 2

    async def test_sources_run_concurrently(self) -> None:
        first_started = asyncio.Event()
        second_started = asyncio.Event()

        async def first(client):
            first_started.set()
            await asyncio.wait_for(second_started.wait(), timeout=1)
            return [_item(Category.AI, 1)]

        async def second(client):
            second_started.set()
            await asyncio.wait_for(first_started.wait(), timeout=1)
            return [_item(Category.STARTUP, 1)]

        feed_set = await aggregate(
            [_StubSource(Category.AI, first), _StubSource(Category.STARTUP, second)],
            client=AsyncMock(),
        )

        assert [item.id for item in feed_set.items(Category.AI)] == ["ai-live-1"]
        assert [item.id for item in feed_set.items(Category.STARTUP)] == ["startup-live-1"]

    async def test_to_dict_shape(self) -> None:
        sources = [_StubSource(category, _live_stage(category)) for category in Category]
        data = (await aggregate(sources, client=AsyncMock())).to_dict()

        assert set(data) == {"productHunt", "techNews", "aiNews", "startupNews", "lastUpdated"}
        assert data["lastUpdated"].endswith("Z")
        first = data["techNews"][0]
        assert first["sourceName"] == "tech"
        assert first["category"] == "tech"
        assert first["publishedAt"].endswith("Z")
        assert "votes" not in first
        assert "imageUrl" not in first

    def test_default_sources_cover_every_category(self) -> None:
        assert {source.category for source in default_sources()} == set(Category)


class TestAggregateOffline:
    async def test_every_upstream_down_serves_demo_data(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("newsdesk.config.settings.proxy_templates", ("https://relay-one.test/raw?url={url}",))
        monkeypatch.setattr("newsdesk.config.settings.hn_api_base", "https://hn.test/v0")
        monkeypatch.setattr("newsdesk.config.settings.algolia_api_base", "https://algolia.test/api/v1")

        with respx.mock:
            respx.route().mock(return_value=httpx.Response(500))
            feed_set = await aggregate()

        assert len(feed_set.items(Category.PRODUCTHUNT)) == 8
        assert [item.id for item in feed_set.items(Category.TECH)] == ["tech-1"]
        assert [item.id for item in feed_set.items(Category.AI)] == ["ai-1"]
        assert [item.id for item in feed_set.items(Category.STARTUP)] == ["startup-1"]
