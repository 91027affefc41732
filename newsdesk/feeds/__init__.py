"""Feed aggregation package — four category feeds with per-source fallback."""

from newsdesk.feeds.aggregator import aggregate, default_sources
from newsdesk.feeds.models import AggregatedFeedSet, Category, FeedItem

__all__ = ["aggregate", "default_sources", "AggregatedFeedSet", "Category", "FeedItem"]
