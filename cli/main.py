"""newsdesk CLI — entry-point for the article extractor and feed aggregator.

Usage:
    python cli/main.py --help

Commands:
    article   → fetch and print a readable version of an article URL
    news      → aggregate the four category feeds
    serve     → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from newsdesk.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
import logging
from typing import Optional

import typer

from cli.rendering import render_article, render_feed_set
from newsdesk.config import settings
from newsdesk.feeds.models import Category

app = typer.Typer(
    name="newsdesk",
    help="newsdesk backend CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every fetch attempt."),
) -> None:
    """Configure logging for all sub-commands."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Article extraction
# ---------------------------------------------------------------------------
@app.command("article")
def article(
    url: str = typer.Argument(..., help="Article URL to fetch."),
    title: Optional[str] = typer.Option(None, help="Fallback title if the page cannot be fetched."),
    description: Optional[str] = typer.Option(None, help="Fallback description."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON record."),
) -> None:
    """Fetch a URL and print its readable content."""
    from newsdesk.scraper.extractor import InvalidUrlError, extract_article

    try:
        result = asyncio.run(extract_article(url, title=title, description=description))
    except InvalidUrlError as exc:
        typer.echo(f"[article] {exc}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_article(result))


# ---------------------------------------------------------------------------
# Feed aggregation
# ---------------------------------------------------------------------------
@app.command("news")
def news(
    category: Optional[Category] = typer.Option(None, help="Only show one category."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
) -> None:
    """Aggregate Product Hunt, Hacker News, AI and startup news."""
    from newsdesk.feeds.aggregator import aggregate

    feed_set = asyncio.run(aggregate())
    if as_json:
        typer.echo(json.dumps(feed_set.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_feed_set(feed_set, category))


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    typer.echo(f"[serve] newsdesk API on http://{host}:{port}")
    uvicorn.run("newsdesk.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
