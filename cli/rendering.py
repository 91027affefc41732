"""Plain-text rendering of articles and feed sets for the CLI."""

from __future__ import annotations

from newsdesk.feeds.models import AggregatedFeedSet, Category, FeedItem
from newsdesk.scraper.models import ArticleResult

_CATEGORY_TITLES = {
    Category.PRODUCTHUNT: "Product Hunt",
    Category.TECH: "Tech News",
    Category.AI: "AI News",
    Category.STARTUP: "Startup News",
}


def render_article(result: ArticleResult) -> str:
    """Render an article header followed by its normalised body."""
    lines = [
        result.title,
        f"{result.site_name}  ·  {result.source_url}",
    ]
    if result.description:
        lines.append(result.description)
    if result.image:
        lines.append(f"Image: {result.image}")
    lines.append("=" * 72)

    if result.failed:
        lines.append("Could not extract a readable version of this article.")
        lines.append(f"Open the original: {result.source_url}")
        if result.content:
            lines.append("")
            lines.append(result.content)
    else:
        lines.append(result.content)
    return "\n".join(lines)


def _item_line(index: int, item: FeedItem) -> str:
    stats = []
    if item.votes is not None:
        stats.append(f"▲{item.votes}")
    if item.comments is not None:
        stats.append(f"💬{item.comments}")
    suffix = f"  ({' '.join(stats)})" if stats else ""
    return f"  {index:>2}. {item.title}{suffix}\n      {item.url}"


def render_feed_set(feed_set: AggregatedFeedSet, category: Category | None = None) -> str:
    """Render each category as a numbered list."""
    categories = [category] if category is not None else list(_CATEGORY_TITLES)
    blocks: list[str] = []
    for cat in categories:
        items = feed_set.items(cat)
        header = f"{_CATEGORY_TITLES[cat]} ({len(items)})"
        body = [_item_line(i, item) for i, item in enumerate(items, start=1)]
        blocks.append("\n".join([header, "-" * len(header), *body]))
    blocks.append(f"Last updated: {feed_set.to_dict()['lastUpdated']}")
    return "\n\n".join(blocks)
