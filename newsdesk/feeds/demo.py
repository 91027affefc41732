"""Static demo datasets served when a feed source is unreachable.

Each call builds fresh items stamped with the current time.
"""

from __future__ import annotations

from newsdesk.feeds.models import Category, FeedItem, utcnow

_PRODUCTS = [
    ("notion-calendar", "Notion Calendar", "Your calendar, tasks, and notes in one place", 1247, 89, "Ivan Zhao", "notion"),
    ("arc-max", "Arc Max", "AI-powered features for the Arc Browser", 892, 156, "Josh Miller", "arc"),
    ("raycast-pro", "Raycast Pro", "Your shortcut to everything on Mac", 756, 67, "Thomas Paul Mann", "raycast"),
    ("linear-asks", "Linear Asks", "AI-powered issue creation for teams", 634, 45, "Karri Saarinen", "linear"),
    ("figma-ai", "Figma AI", "Design faster with AI-powered tools", 521, 78, "Dylan Field", "figma"),
    ("claude-3-5-sonnet", "Claude 3.5 Sonnet", "Anthropic's most intelligent AI model", 2103, 234, "Anthropic", "claude"),
    ("cursor-2", "Cursor", "The AI-first code editor", 1876, 189, "Michael Truell", "cursor"),
    ("perplexity-pro", "Perplexity Pro", "AI-powered answer engine for research", 1543, 127, "Aravind Srinivas", "perplexity"),
]


def producthunt_demo() -> list[FeedItem]:
    now = utcnow()
    return [
        FeedItem(
            id=f"ph-demo-{index}",
            title=title,
            description=tagline,
            url=f"https://www.producthunt.com/posts/{slug}",
            source_name="Product Hunt",
            category=Category.PRODUCTHUNT,
            published_at=now,
            votes=votes,
            comments=comments,
            maker=maker,
            image_url=f"https://ph-files.imgix.net/{logo}-logo.png",
        )
        for index, (slug, title, tagline, votes, comments, maker, logo) in enumerate(_PRODUCTS, start=1)
    ]


def tech_demo() -> list[FeedItem]:
    return [
        FeedItem(
            id="tech-1",
            title="Latest Tech News",
            description="Stay updated with the latest technology news",
            url="https://news.ycombinator.com",
            source_name="Hacker News",
            category=Category.TECH,
        )
    ]


def ai_demo() -> list[FeedItem]:
    return [
        FeedItem(
            id="ai-1",
            title="AI & Machine Learning Updates",
            description="Latest developments in artificial intelligence",
            url="https://news.ycombinator.com",
            source_name="AI News",
            category=Category.AI,
        )
    ]


def startup_demo() -> list[FeedItem]:
    return [
        FeedItem(
            id="startup-1",
            title="Startup & Funding News",
            description="Latest startup ecosystem updates",
            url="https://news.ycombinator.com",
            source_name="Startup News",
            category=Category.STARTUP,
        )
    ]
