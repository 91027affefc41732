"""Article extraction endpoint.

Routes
------
POST /api/fetch-article    Body: {"url": "https://...", "title"?: ..., "description"?: ...}

Fetch and parsing failures never produce an error status: the response is
always an article record, with ``failed: true`` when no readable body was
found.  Only a missing or unusable URL is rejected (400).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from newsdesk.scraper.extractor import InvalidUrlError, extract_article

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ArticleRequest(BaseModel):
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class ArticleResponse(BaseModel):
    title: str
    description: str
    image: str
    siteName: str
    content: str
    sourceUrl: str
    failed: bool


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post("/fetch-article", response_model=ArticleResponse)
async def fetch_article(body: ArticleRequest) -> dict[str, Any]:
    """Return the readable representation of ``body.url``."""
    try:
        result = await extract_article(body.url, title=body.title, description=body.description)
    except InvalidUrlError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("[fetch-article] unexpected failure for %r", body.url)
        raise HTTPException(status_code=500, detail="Failed to fetch article") from exc
    return result.to_dict()
