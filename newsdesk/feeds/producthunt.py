"""Product Hunt daily launches (category ``producthunt``).

Product Hunt has no open API, so every stage goes through a CORS relay:

1. the homepage, mined first for the embedded ``__NEXT_DATA__`` JSON and
   then for product-card links;
2. the ``homefeed`` GraphQL query;
3. the public RSS feed, parsed with ``feedparser``;
4. a static demo dataset.
"""

from __future__ import annotations

import calendar
import hashlib
import json
import logging
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import feedparser
import httpx

from newsdesk.config import settings
from newsdesk.feeds.base import FeedSource, Stage, SourceError, as_int, parse_timestamp, request
from newsdesk.feeds.demo import producthunt_demo
from newsdesk.feeds.models import Category, FeedItem, utcnow
from newsdesk.scraper.entities import decode_entities

logger = logging.getLogger(__name__)

MIN_CARD_ITEMS = 3
MAX_SEARCH_DEPTH = 10

_NEXT_DATA_RE = re.compile(
    r'<script id="__NEXT_DATA__"[^>]*>(.*?)</script>', re.DOTALL
)
_CARD_RE = re.compile(
    r'<a[^>]*href="/posts/([^"]+)"[^>]*>.*?<h3[^>]*>([^<]+)</h3>',
    re.IGNORECASE | re.DOTALL,
)
_TAG_RE = re.compile(r"<[^>]*>")

HOMEFEED_QUERY = """
query HomePage {
  homefeed(first: 20) {
    edges {
      node {
        ... on Post {
          id
          name
          tagline
          votesCount
          commentsCount
          slug
          thumbnail { url }
          makers { name }
        }
      }
    }
  }
}
"""


def clean_text(value: str) -> str:
    """Strip tags and character references from a short snippet."""
    stripped = _TAG_RE.sub("", value or "")
    return re.sub(r"\s+", " ", decode_entities(stripped)).strip()


def _is_post(obj: Any) -> bool:
    return isinstance(obj, dict) and bool(obj.get("name") and obj.get("tagline") and obj.get("slug"))


def _post_key(post: dict[str, Any]) -> str:
    return str(post.get("id") or post["slug"])


def _collect_posts(obj: Any, depth: int, found: dict[str, dict[str, Any]]) -> None:
    if depth > MAX_SEARCH_DEPTH or not isinstance(obj, (dict, list)):
        return
    if _is_post(obj):
        found.setdefault(_post_key(obj), obj)
        return
    children = obj if isinstance(obj, list) else obj.values()
    for child in children:
        _collect_posts(child, depth + 1, found)


def find_posts(obj: Any) -> list[dict[str, Any]]:
    """Collect post-like objects from an arbitrary JSON tree.

    A post reachable from several places (page props and the Apollo cache)
    is returned once, at its first position.
    """
    found: dict[str, dict[str, Any]] = {}
    _collect_posts(obj, 0, found)
    return list(found.values())


def _first_maker(post: dict[str, Any]) -> str | None:
    makers = post.get("makers")
    if isinstance(makers, list) and makers and isinstance(makers[0], dict):
        return makers[0].get("name")
    return None


def _thumbnail(post: dict[str, Any]) -> str | None:
    thumbnail = post.get("thumbnail")
    if isinstance(thumbnail, dict) and thumbnail.get("url"):
        return thumbnail["url"]
    return post.get("thumbnailUrl")


class ProductHuntSource(FeedSource):
    name = "Product Hunt"
    category = Category.PRODUCTHUNT

    def stages(self) -> list[tuple[str, Stage]]:
        return [
            ("homepage", self._homepage),
            ("graphql", self._graphql),
            ("rss", self._rss),
        ]

    def demo_items(self) -> list[FeedItem]:
        return producthunt_demo()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def relay(self, url: str) -> str:
        """Wrap *url* in the first configured relay (or leave it bare)."""
        templates = settings.proxy_templates
        if not templates:
            return url
        return templates[0].replace("{url}", quote(url, safe=""))

    def post_url(self, slug: str) -> str:
        return f"{settings.producthunt_base_url}/posts/{slug}"

    def _post_to_item(self, post: dict[str, Any]) -> FeedItem:
        return FeedItem(
            id=f"ph-{post.get('id') or post['slug']}",
            title=post["name"],
            description=post.get("tagline") or "",
            url=self.post_url(post["slug"]),
            source_name=self.name,
            category=self.category,
            image_url=_thumbnail(post),
            published_at=parse_timestamp(post.get("createdAt")),
            votes=as_int(post.get("votesCount")),
            comments=as_int(post.get("commentsCount")),
            maker=_first_maker(post),
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _homepage(self, client: httpx.AsyncClient) -> list[FeedItem]:
        response = await request(
            client,
            "GET",
            self.relay(f"{settings.producthunt_base_url}/"),
            headers={"User-Agent": settings.browser_user_agent},
        )
        html = response.text

        items = self.parse_next_data(html)
        if items:
            return items

        items = self.parse_cards(html)
        if len(items) < MIN_CARD_ITEMS:
            raise SourceError(f"only {len(items)} product card(s) on homepage")
        return items

    def parse_next_data(self, html: str) -> list[FeedItem]:
        match = _NEXT_DATA_RE.search(html)
        if match is None:
            return []
        try:
            data = json.loads(match.group(1))
        except ValueError:
            logger.warning("[%s] __NEXT_DATA__ is not valid JSON.", self.name)
            return []
        posts = find_posts(data)[: settings.feed_limit]
        return [self._post_to_item(post) for post in posts]

    def parse_cards(self, html: str) -> list[FeedItem]:
        items: list[FeedItem] = []
        seen: set[str] = set()
        now = utcnow()
        for match in _CARD_RE.finditer(html):
            if len(items) >= settings.feed_limit:
                break
            slug = match.group(1)
            title = clean_text(match.group(2))
            if not slug or "/" in slug or slug in seen or len(title) <= 2:
                continue
            seen.add(slug)
            items.append(
                FeedItem(
                    id=f"ph-{slug}",
                    title=title,
                    description="",
                    url=self.post_url(slug),
                    source_name=self.name,
                    category=self.category,
                    published_at=now,
                )
            )
        return items

    async def _graphql(self, client: httpx.AsyncClient) -> list[FeedItem]:
        response = await request(
            client,
            "POST",
            self.relay(f"{settings.producthunt_base_url}/frontend/graphql"),
            json={"operationName": "HomePage", "query": HOMEFEED_QUERY},
            headers={"Content-Type": "application/json"},
        )
        try:
            data = response.json()
        except ValueError as exc:
            raise SourceError("malformed GraphQL response") from exc

        edges = (((data or {}).get("data") or {}).get("homefeed") or {}).get("edges")
        if not isinstance(edges, list):
            raise SourceError("no homefeed edges in GraphQL response")

        items: list[FeedItem] = []
        seen: set[str] = set()
        for edge in edges:
            node = edge.get("node") if isinstance(edge, dict) else None
            if not isinstance(node, dict) or not node.get("name") or not node.get("slug"):
                continue
            if _post_key(node) in seen:
                continue
            seen.add(_post_key(node))
            items.append(self._post_to_item(node))
        return items[: settings.feed_limit]

    async def _rss(self, client: httpx.AsyncClient) -> list[FeedItem]:
        response = await request(
            client,
            "GET",
            self.relay(f"{settings.producthunt_base_url}/feed"),
        )
        return self.parse_rss(response.text)

    def parse_rss(self, content: str | bytes) -> list[FeedItem]:
        parsed = feedparser.parse(content)
        items: list[FeedItem] = []
        seen: set[str] = set()
        for entry in parsed.entries:
            if len(items) >= settings.feed_limit:
                break
            title = clean_text(str(entry.get("title") or ""))
            link = str(entry.get("link") or "").strip()
            if not title or not link or link in seen:
                continue
            seen.add(link)
            summary = clean_text(str(entry.get("summary") or entry.get("description") or ""))
            digest = hashlib.sha1(link.encode("utf-8")).hexdigest()[:10]
            items.append(
                FeedItem(
                    id=f"ph-{digest}",
                    title=title,
                    description=summary[:200],
                    url=link,
                    source_name=self.name,
                    category=self.category,
                    published_at=_entry_published_at(entry),
                )
            )
        return items


def _entry_published_at(entry: Any) -> datetime:
    for key in ("published_parsed", "updated_parsed"):
        value = entry.get(key)
        if value is None:
            continue
        try:
            return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            continue
    return utcnow()
