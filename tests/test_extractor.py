"""Tests for article extraction and its soft-failure contract."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from newsdesk.scraper.extractor import (
    InvalidUrlError,
    assemble_article,
    extract_article,
    extract_content,
    fallback_article,
    has_readable_content,
    validate_url,
)
from newsdesk.scraper.models import ArticleResult, ChainExhausted, HtmlPayload, Strategy
from samples import ARCHIVE_API, ARTICLE_HTML, ARTICLE_URL, SHELL_HTML


def _stub_chain(outcome=None, error: Exception | None = None) -> AsyncMock:
    chain = AsyncMock()
    if error is not None:
        chain.fetch_html.side_effect = error
    else:
        chain.fetch_html.return_value = outcome
    return chain


def _payload(html: str, strategy: Strategy = Strategy.DIRECT) -> HtmlPayload:
    return HtmlPayload(url=ARTICLE_URL, html=html, fetched_from=ARTICLE_URL, strategy=strategy)


# ---------------------------------------------------------------------------
# URL validation
# ---------------------------------------------------------------------------

class TestValidateUrl:
    def test_accepts_http_and_https(self) -> None:
        assert validate_url("https://example.com/a") == "https://example.com/a"
        assert validate_url("  http://example.com  ") == "http://example.com"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value) -> None:
        with pytest.raises(InvalidUrlError, match="URL is required"):
            validate_url(value)

    @pytest.mark.parametrize(
        "value",
        ["not a url", "ftp://example.com/file", "https://", "javascript:alert(1)", "http://[::1"],
    )
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidUrlError, match="Invalid URL"):
            validate_url(value)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

class TestAssembleArticle:
    def test_full_article(self) -> None:
        result = assemble_article(ARTICLE_HTML, ARTICLE_URL)

        assert result.failed is False
        assert result.title == "Battery Breakthrough"
        assert result.description == "A new cell design charges in minutes."
        assert result.image == "https://news.example.com/img/battery.jpg"
        assert result.site_name == "Example News"
        assert result.source_url == ARTICLE_URL
        assert result.content.startswith("## Battery Breakthrough")
        assert "• Faster charging" in result.content
        assert "Home" not in result.content
        assert "Copyright" not in result.content

    def test_shell_page_has_metadata_but_fails(self) -> None:
        result = assemble_article(SHELL_HTML, ARTICLE_URL)

        assert result.failed is True
        assert result.content == ""
        assert result.title == "Subscriber Exclusive"
        assert result.site_name == "news.example.com"

    def test_readability_check(self) -> None:
        assert has_readable_content(ARTICLE_HTML) is True
        assert has_readable_content(SHELL_HTML) is False
        assert extract_content("") == ""


class TestArticleResult:
    def _result(self, content: str) -> ArticleResult:
        return ArticleResult(
            title="t", description="", image="", site_name="s", content=content, source_url=ARTICLE_URL
        )

    def test_boundary(self) -> None:
        assert self._result("x" * 49).failed is True
        assert self._result("x" * 50).failed is False
        assert self._result("").failed is True

    def test_failed_cannot_be_passed_in(self) -> None:
        with pytest.raises(TypeError):
            ArticleResult(
                title="t", description="", image="", site_name="s",
                content="", source_url=ARTICLE_URL, failed=False,
            )

    def test_to_dict_keys(self) -> None:
        data = self._result("x" * 60).to_dict()
        assert data == {
            "title": "t",
            "description": "",
            "image": "",
            "siteName": "s",
            "content": "x" * 60,
            "sourceUrl": ARTICLE_URL,
            "failed": False,
        }

    def test_fallback_article(self) -> None:
        result = fallback_article(ARTICLE_URL)
        assert result.title == "Article"
        assert result.description == ""
        assert result.site_name == "news.example.com"
        assert result.failed is True


# ---------------------------------------------------------------------------
# extract_article
# ---------------------------------------------------------------------------

class TestExtractArticle:
    async def test_invalid_url_raises(self) -> None:
        chain = _stub_chain()
        with pytest.raises(InvalidUrlError):
            await extract_article("notaurl", chain=chain)
        chain.fetch_html.assert_not_called()

    async def test_success(self) -> None:
        chain = _stub_chain(_payload(ARTICLE_HTML))
        result = await extract_article(ARTICLE_URL, chain=chain)

        assert result.failed is False
        assert result.title == "Battery Breakthrough"
        chain.fetch_html.assert_awaited_once_with(ARTICLE_URL, accept=has_readable_content)

    async def test_archive_payload_keeps_request_url(self) -> None:
        payload = HtmlPayload(
            url=ARTICLE_URL,
            html=ARTICLE_HTML.replace('<meta property="og:site_name" content="Example News">', ""),
            fetched_from="https://web.archive.test/web/2024/" + ARTICLE_URL,
            strategy=Strategy.ARCHIVE,
        )
        result = await extract_article(ARTICLE_URL, chain=_stub_chain(payload))

        assert result.source_url == ARTICLE_URL
        assert result.site_name == "news.example.com"

    async def test_exhausted_without_html_uses_caller_hints(self) -> None:
        chain = _stub_chain(ChainExhausted(url=ARTICLE_URL))
        result = await extract_article(
            ARTICLE_URL, title="Feed Title", description="Feed blurb", chain=chain
        )

        assert result.failed is True
        assert result.content == ""
        assert result.title == "Feed Title"
        assert result.description == "Feed blurb"
        assert result.image == ""
        assert result.site_name == "news.example.com"
        assert result.source_url == ARTICLE_URL

    async def test_exhausted_with_partial_keeps_metadata(self) -> None:
        chain = _stub_chain(ChainExhausted(url=ARTICLE_URL, partial=_payload(SHELL_HTML)))
        result = await extract_article(ARTICLE_URL, title="Feed Title", chain=chain)

        assert result.failed is True
        assert result.title == "Subscriber Exclusive"
        assert result.description == "Sign in to keep reading."

    async def test_chain_crash_is_soft_failure(self) -> None:
        chain = _stub_chain(error=RuntimeError("kaboom"))
        result = await extract_article(ARTICLE_URL, chain=chain)

        assert result.failed is True
        assert result.title == "Article"

    async def test_every_strategy_failing_end_to_end(self, fetch_settings) -> None:
        with respx.mock:
            respx.get(ARTICLE_URL).mock(return_value=httpx.Response(403))
            respx.get(url__startswith="https://relay-one.test/").mock(
                side_effect=httpx.ConnectError("refused")
            )
            respx.get(url__startswith="https://relay-two.test/").mock(return_value=httpx.Response(429))
            respx.get(url__startswith=ARCHIVE_API).mock(
                return_value=httpx.Response(200, json={"archived_snapshots": {}})
            )
            result = await extract_article(ARTICLE_URL, title="Hinted")

        assert result.failed is True
        assert result.content == ""
        assert result.title == "Hinted"
        assert result.source_url == ARTICLE_URL

    async def test_malformed_archive_lookup_keeps_partial_metadata(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("newsdesk.config.settings.proxy_templates", ())
        monkeypatch.setattr("newsdesk.config.settings.archive_api_url", ARCHIVE_API)
        with respx.mock:
            respx.get(ARTICLE_URL).mock(return_value=httpx.Response(200, text=SHELL_HTML))
            respx.get(url__startswith=ARCHIVE_API).mock(
                return_value=httpx.Response(200, json={"archived_snapshots": ["oops"]})
            )
            result = await extract_article(ARTICLE_URL, title="Caller")

        assert result.failed is True
        assert result.title == "Subscriber Exclusive"
        assert result.description == "Sign in to keep reading."
