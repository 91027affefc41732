"""Aggregated news endpoint.

Routes
------
GET /api/news    → {"productHunt": [...], "techNews": [...], "aiNews": [...],
                    "startupNews": [...], "lastUpdated": "..."}

Each list degrades to its own demo data independently, so this endpoint
always answers 200.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from newsdesk.feeds.aggregator import aggregate

router = APIRouter()


@router.get("/news")
async def news() -> dict[str, Any]:
    """Fetch all four category feeds concurrently."""
    feed_set = await aggregate()
    return feed_set.to_dict()
