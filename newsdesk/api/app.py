"""FastAPI application factory.

Routers
-------
Both endpoint groups are mounted under ``/api``:

    /api/fetch-article  — readable article extraction with fallback fetching
    /api/news           — aggregated category feeds
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newsdesk.api.routers import articles as articles_router
from newsdesk.api.routers import news as news_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="newsdesk API",
        description=(
            "Backend for the news dashboard. Extracts a readable version of "
            "any article URL (direct, proxy and archive fallbacks) and "
            "aggregates the Product Hunt, Hacker News, AI and startup feeds."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(articles_router.router, prefix="/api", tags=["articles"])
    app.include_router(news_router.router, prefix="/api", tags=["news"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn newsdesk.api.app:app --reload
app = create_app()
