"""Common fallback machinery for feed sources.

Every source exposes an ordered list of named stages (primary API, then
alternates) plus a static demo dataset.  ``FeedSource.fetch`` runs the
stages in order and returns the first non-empty list; if every stage fails
or comes back empty it returns the demo dataset.  It never raises.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

import httpx

from newsdesk.config import settings
from newsdesk.feeds.models import Category, FeedItem, utcnow

logger = logging.getLogger(__name__)

Stage = Callable[[httpx.AsyncClient], Awaitable[list[FeedItem]]]


class SourceError(Exception):
    """A feed stage could not produce items."""


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> Any:
    """GET *url* and decode its JSON body.

    Raises:
        SourceError: On timeout, transport error, bad status or invalid JSON.
    """
    response = await request(client, "GET", url, params=params, timeout=timeout)
    try:
        return response.json()
    except ValueError as exc:
        raise SourceError(f"malformed JSON from {url}") from exc


async def request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    timeout: float | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Issue a request bounded by the feed timeout.

    Raises:
        SourceError: On timeout, transport error or a non-2xx status.
    """
    limit = timeout if timeout is not None else settings.feed_timeout
    try:
        response = await asyncio.wait_for(
            client.request(method, url, timeout=limit, follow_redirects=True, **kwargs),
            timeout=limit,
        )
    except asyncio.TimeoutError as exc:
        raise SourceError(f"timed out after {limit:.0f}s") from exc
    except httpx.HTTPError as exc:
        raise SourceError(f"{type(exc).__name__}: {exc}") from exc
    if not response.is_success:
        raise SourceError(f"HTTP {response.status_code} from {url}")
    return response


def parse_timestamp(value: Any) -> datetime:
    """Best-effort conversion of epoch seconds or ISO-8601 text to UTC."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return utcnow()
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return utcnow()
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return utcnow()


def as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class FeedSource(ABC):
    """One upstream category feed with its own fallback chain."""

    name: str
    category: Category

    @abstractmethod
    def stages(self) -> list[tuple[str, Stage]]:
        """Return ``(label, stage)`` pairs in priority order."""

    @abstractmethod
    def demo_items(self) -> list[FeedItem]:
        """Static dataset used when every stage fails."""

    async def fetch(self, client: httpx.AsyncClient) -> list[FeedItem]:
        for label, stage in self.stages():
            try:
                items = await stage(client)
            except Exception as exc:
                logger.warning("[%s] %s failed: %s", self.name, label, exc)
                continue
            if items:
                logger.info("[%s] ✓ %s → %d item(s).", self.name, label, len(items))
                return items[: settings.feed_limit]
            logger.warning("[%s] %s returned no items, trying next stage.", self.name, label)

        logger.warning("[%s] all stages exhausted, serving demo data.", self.name)
        return self.demo_items()
