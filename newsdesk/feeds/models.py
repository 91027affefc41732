"""Data models for the feed aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Category(str, Enum):
    PRODUCTHUNT = "producthunt"
    TECH = "tech"
    AI = "ai"
    STARTUP = "startup"


# Response keys the dashboard expects for each category list.
CATEGORY_KEYS = {
    Category.PRODUCTHUNT: "productHunt",
    Category.TECH: "techNews",
    Category.AI: "aiNews",
    Category.STARTUP: "startupNews",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class FeedItem:
    """A single story or product in a category list."""

    id: str
    title: str
    description: str
    url: str
    source_name: str
    category: Category
    published_at: datetime = field(default_factory=utcnow)
    image_url: str | None = None
    votes: int | None = None
    comments: int | None = None
    maker: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "sourceName": self.source_name,
            "category": self.category.value,
            "publishedAt": isoformat(self.published_at),
        }
        optional = {
            "imageUrl": self.image_url,
            "votes": self.votes,
            "comments": self.comments,
            "maker": self.maker,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


@dataclass
class AggregatedFeedSet:
    """One refresh worth of category lists."""

    per_category: dict[Category, list[FeedItem]]
    last_updated: datetime = field(default_factory=utcnow)

    def items(self, category: Category) -> list[FeedItem]:
        return self.per_category.get(category, [])

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            key: [item.to_dict() for item in self.items(category)]
            for category, key in CATEGORY_KEYS.items()
        }
        data["lastUpdated"] = isoformat(self.last_updated)
        return data
