"""Layered HTML acquisition with automatic failover.

Strategy priority (highest to lowest):
  1. Direct   — GET with browser-like headers, following redirects.
  2. Proxy    — the same GET routed through each configured CORS relay.
  3. Archive  — Wayback Machine availability lookup, then a direct GET of
                the closest snapshot.

All strategies share a common interface:
``attempt(client, url, accept) -> FetchAttempt``.  The
``FetchStrategyChain`` tries each one strictly in order and stops at the
first success.  Strategies never raise: every network error, timeout, bad
status or rejected page is recorded as a failed attempt and the chain moves
on.  If every strategy fails the chain returns a ``ChainExhausted`` sentinel.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable
from urllib.parse import quote

import httpx

from newsdesk.config import settings
from newsdesk.scraper.models import (
    ChainExhausted,
    FetchAttempt,
    HtmlPayload,
    Strategy,
)

logger = logging.getLogger(__name__)

Acceptor = Callable[[str], bool]


def browser_headers() -> dict[str, str]:
    """Headers a desktop Chrome sends on a top-level navigation."""
    return {
        "User-Agent": settings.browser_user_agent,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/avif,image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Ch-Ua": '"Not A(Brand";v="99", "Google Chrome";v="121", "Chromium";v="121"',
        "Sec-Ch-Ua-Mobile": "?0",
        "Sec-Ch-Ua-Platform": '"Windows"',
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
    }


def _accept_all(html: str) -> bool:
    return True


class FetchError(Exception):
    """A single download failed; the message is the reason."""


async def download(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """GET *url* within *timeout* seconds overall.

    Raises:
        FetchError: On timeout, transport error or a non-2xx status.
    """
    try:
        response = await asyncio.wait_for(
            client.get(url, headers=headers, follow_redirects=True, timeout=timeout),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        raise FetchError(f"timed out after {timeout:.0f}s") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"{type(exc).__name__}: {exc}") from exc

    if not response.is_success:
        raise FetchError(f"HTTP {response.status_code}")
    return response


def _check_page(html: str) -> None:
    if not html or len(html) < settings.min_html_length:
        raise FetchError(
            f"body too short ({len(html or '')} chars), likely a bot wall"
        )


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class FetchStrategy(ABC):
    """One way of acquiring the HTML of a page."""

    kind: Strategy

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    async def attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        accept: Acceptor = _accept_all,
    ) -> FetchAttempt:
        """Try to acquire *url*.  Must return a failed attempt, not raise."""


# ---------------------------------------------------------------------------
# Direct fetch
# ---------------------------------------------------------------------------

class DirectFetchStrategy(FetchStrategy):
    """Plain GET with a realistic browser fingerprint."""

    kind = Strategy.DIRECT

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else settings.direct_fetch_timeout

    async def attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        accept: Acceptor = _accept_all,
    ) -> FetchAttempt:
        timeout = self.timeout
        try:
            response = await download(client, url, timeout=timeout, headers=browser_headers())
            html = response.text
            _check_page(html)
        except FetchError as exc:
            logger.warning("[%s] %s failed: %s", self.name, url, exc)
            return FetchAttempt(self.kind, url, timeout, reason=str(exc))

        if not accept(html):
            logger.warning("[%s] %s: no readable content", self.name, url)
            return FetchAttempt(self.kind, url, timeout, html=html, reason="no readable content")

        logger.info("[%s] ✓ %s (%d chars)", self.name, url, len(html))
        return FetchAttempt(self.kind, url, timeout, html=html)


# ---------------------------------------------------------------------------
# CORS-relay proxies
# ---------------------------------------------------------------------------

class ProxyFetchStrategy(FetchStrategy):
    """Route the GET through public CORS relays, tried in order.

    Relays are unreliable third parties: a relay only counts as a success
    when the page it returns passes the acceptance check, not merely when
    it answers 200.
    """

    kind = Strategy.PROXY

    def __init__(
        self,
        templates: tuple[str, ...] | list[str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._templates = tuple(templates) if templates is not None else None
        self._timeout = timeout

    @property
    def templates(self) -> tuple[str, ...]:
        return self._templates if self._templates is not None else settings.proxy_templates

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else settings.proxy_fetch_timeout

    def relay_urls(self, url: str) -> list[str]:
        encoded = quote(url, safe="")
        return [template.replace("{url}", encoded) for template in self.templates]

    async def attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        accept: Acceptor = _accept_all,
    ) -> FetchAttempt:
        timeout = self.timeout
        relays = self.relay_urls(url)
        if not relays:
            return FetchAttempt(self.kind, url, timeout, reason="no proxy relays configured")

        rejected: FetchAttempt | None = None
        reason = "all relays failed"
        headers = {"User-Agent": settings.browser_user_agent}
        for relay in relays:
            try:
                response = await download(client, relay, timeout=timeout, headers=headers)
                html = response.text
                _check_page(html)
            except FetchError as exc:
                logger.warning("[%s] %s failed: %s, trying next relay.", self.name, relay, exc)
                reason = str(exc)
                continue

            if accept(html):
                logger.info("[%s] ✓ %s (%d chars)", self.name, relay, len(html))
                return FetchAttempt(self.kind, relay, timeout, html=html)

            logger.warning("[%s] %s: no readable content, trying next relay.", self.name, relay)
            reason = "no readable content"
            if rejected is None:
                rejected = FetchAttempt(self.kind, relay, timeout, html=html, reason=reason)

        logger.warning("[%s] all relays exhausted for %s.", self.name, url)
        if rejected is not None:
            return rejected
        return FetchAttempt(self.kind, url, timeout, reason=reason)


# ---------------------------------------------------------------------------
# Web archive
# ---------------------------------------------------------------------------

class ArchiveFetchStrategy(FetchStrategy):
    """Look the URL up in the Wayback Machine and fetch the closest snapshot.

    The snapshot is fetched once with the direct strategy; there is no
    further chaining from it.
    """

    kind = Strategy.ARCHIVE

    def __init__(
        self,
        lookup_timeout: float | None = None,
        snapshot_strategy: DirectFetchStrategy | None = None,
    ) -> None:
        self._lookup_timeout = lookup_timeout
        self._snapshot_strategy = snapshot_strategy or DirectFetchStrategy()

    @property
    def lookup_timeout(self) -> float:
        if self._lookup_timeout is not None:
            return self._lookup_timeout
        return settings.archive_lookup_timeout

    def lookup_url(self, url: str) -> str:
        return f"{settings.archive_api_url}?url={quote(url, safe='')}"

    async def find_snapshot(self, client: httpx.AsyncClient, url: str) -> str | None:
        """Return the closest archived snapshot URL for *url*, if any.

        Raises:
            FetchError: If the lookup fails or its JSON has an unexpected shape.
        """
        response = await download(client, self.lookup_url(url), timeout=self.lookup_timeout)
        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError("malformed archive lookup response") from exc

        if not isinstance(data, dict):
            raise FetchError("malformed archive lookup response")
        snapshots = data.get("archived_snapshots") or {}
        if not isinstance(snapshots, dict):
            raise FetchError("malformed archive lookup response")
        closest = snapshots.get("closest") or {}
        if not isinstance(closest, dict):
            raise FetchError("malformed archive lookup response")
        snapshot = closest.get("url")
        if snapshot is not None and not isinstance(snapshot, str):
            raise FetchError("malformed archive lookup response")
        return snapshot or None

    async def attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        accept: Acceptor = _accept_all,
    ) -> FetchAttempt:
        try:
            snapshot = await self.find_snapshot(client, url)
        except FetchError as exc:
            logger.warning("[%s] lookup for %s failed: %s", self.name, url, exc)
            return FetchAttempt(self.kind, url, self.lookup_timeout, reason=str(exc))

        if not snapshot:
            logger.warning("[%s] no snapshot of %s.", self.name, url)
            return FetchAttempt(self.kind, url, self.lookup_timeout, reason="no archived snapshot")

        result = await self._snapshot_strategy.attempt(client, snapshot, accept)
        return FetchAttempt(
            self.kind,
            snapshot,
            result.timeout,
            html=result.html,
            reason=result.reason,
        )


# ---------------------------------------------------------------------------
# Strategy chain
# ---------------------------------------------------------------------------

class FetchStrategyChain:
    """Try strategies in order; return the first accepted page.

    Strategies run strictly one after another, never raced: the relays and
    the archive are only touched after every earlier strategy has failed.
    """

    def __init__(
        self,
        strategies: list[FetchStrategy],
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._strategies = strategies
        self._client = client

    @property
    def strategies(self) -> list[FetchStrategy]:
        return list(self._strategies)

    async def fetch_html(
        self,
        url: str,
        accept: Acceptor = _accept_all,
    ) -> HtmlPayload | ChainExhausted:
        if self._client is not None:
            return await self._run(self._client, url, accept)
        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await self._run(client, url, accept)

    async def _run(
        self,
        client: httpx.AsyncClient,
        url: str,
        accept: Acceptor,
    ) -> HtmlPayload | ChainExhausted:
        attempts: list[FetchAttempt] = []
        partial: HtmlPayload | None = None

        for strategy in self._strategies:
            result = await strategy.attempt(client, url, accept)
            attempts.append(result)
            if result.ok:
                return HtmlPayload(
                    url=url,
                    html=result.html or "",
                    fetched_from=result.url,
                    strategy=result.strategy,
                    attempts=tuple(attempts),
                )
            if partial is None and result.html:
                partial = HtmlPayload(
                    url=url,
                    html=result.html,
                    fetched_from=result.url,
                    strategy=result.strategy,
                )

        logger.warning("[chain] all strategies failed for %s.", url)
        return ChainExhausted(url=url, attempts=tuple(attempts), partial=partial)


# ---------------------------------------------------------------------------
# Default chain factory
# ---------------------------------------------------------------------------

def build_default_chain(client: httpx.AsyncClient | None = None) -> FetchStrategyChain:
    """Direct → proxy relays → web archive."""
    return FetchStrategyChain(
        [
            DirectFetchStrategy(),
            ProxyFetchStrategy(),
            ArchiveFetchStrategy(),
        ],
        client=client,
    )


async def fetch_html(url: str, accept: Acceptor = _accept_all) -> HtmlPayload | ChainExhausted:
    """Acquire *url* through the default chain."""
    return await build_default_chain().fetch_html(url, accept)
