"""Tests for main-content location."""

from __future__ import annotations

from newsdesk.scraper.locator import locate_main_content
from samples import ARTICLE_HTML, SHELL_HTML

_LONG_TEXT = (
    "The committee spent most of the afternoon debating the proposal, and by "
    "the end of the session a majority had agreed to move it forward for a vote."
)


def _para(n: int) -> str:
    return f"<p>{n}. {_LONG_TEXT}</p>"


class TestSemanticContainers:
    def test_article_element_wins(self) -> None:
        content = locate_main_content(ARTICLE_HTML)
        assert "<h1>Battery Breakthrough</h1>" in content
        assert "Paragraph 5:" in content
        assert "<nav>" not in content
        assert "Copyright" not in content

    def test_main_element_used_without_article(self) -> None:
        html = f"<body><nav>menu</nav><main>{_para(1)}{_para(2)}</main><footer>f</footer></body>"
        content = locate_main_content(html)
        assert content == f"{_para(1)}{_para(2)}"

    def test_article_before_main(self) -> None:
        html = f"<main><aside>side</aside><article>{_para(1)}{_para(2)}</article></main>"
        assert locate_main_content(html) == f"{_para(1)}{_para(2)}"

    def test_custom_elements_with_container_prefix_ignored(self) -> None:
        html = (
            "<main-nav><a>Home</a></main-nav>"
            "<article-card>Teaser card</article-card>"
            f"<main>{_para(1)}{_para(2)}</main>"
        )
        assert locate_main_content(html) == f"{_para(1)}{_para(2)}"


class TestClassContainers:
    def test_specific_class_preferred_over_generic(self) -> None:
        html = (
            f'<div class="post-wrapper"><span>{_LONG_TEXT} {_LONG_TEXT}</span></div>'
            f'<div class="entry-content">{_para(1)}{_para(2)}</div>'
        )
        assert locate_main_content(html) == f"{_para(1)}{_para(2)}"

    def test_generic_class_used_when_no_specific(self) -> None:
        html = f'<div class="story"><span>{_LONG_TEXT}</span><span>{_LONG_TEXT}</span></div>'
        assert locate_main_content(html) == f"<span>{_LONG_TEXT}</span><span>{_LONG_TEXT}</span>"

    def test_section_class(self) -> None:
        html = f'<section class="article-section"><span>{_LONG_TEXT} {_LONG_TEXT}</span></section>'
        assert locate_main_content(html) == f"<span>{_LONG_TEXT} {_LONG_TEXT}</span>"

    def test_short_class_match_rejected(self) -> None:
        html = '<div class="content">Too short to count.</div>'
        assert locate_main_content(html) == ""


class TestParagraphFallback:
    def test_long_paragraphs_aggregated(self) -> None:
        html = "<body>" + "".join(
            f"<div class='x{i}'>{_para(i)}</div>" for i in range(1, 6)
        ) + "<p>Short one.</p></body>"
        content = locate_main_content(html)
        assert content == "\n".join(_para(i) for i in range(1, 6))
        assert "Short one." not in content

    def test_short_article_overridden_by_paragraphs(self) -> None:
        html = f"<article>Teaser</article><div>{_para(1)}</div>"
        assert locate_main_content(html) == _para(1)

    def test_short_article_kept_without_long_paragraphs(self) -> None:
        html = "<article>Teaser text</article><p>short</p>"
        assert locate_main_content(html) == "Teaser text"

    def test_nothing_found(self) -> None:
        assert locate_main_content(SHELL_HTML) == ""
        assert locate_main_content("") == ""
