"""Find the main body of an article page without building a DOM.

Heuristics are tried in order, trading precision for recall:

1. the contents of the first ``<article>`` element;
2. the contents of the first ``<main>`` element;
3. the first container whose class names look like article content,
   specific names (``entry-content``) before generic ones (``post``);
4. every paragraph whose text is long enough, joined together.

Matching is regex-based and non-greedy, so nested same-named containers
end at the first closing tag.
"""

from __future__ import annotations

import re

from newsdesk.config import settings

_FLAGS = re.IGNORECASE | re.DOTALL

_ARTICLE_RE = re.compile(r"<article(?=[\s>/])[^>]*>(.*?)</article\s*>", _FLAGS)
_MAIN_RE = re.compile(r"<main(?=[\s>/])[^>]*>(.*?)</main\s*>", _FLAGS)

_CLASS_PATTERNS = [
    re.compile(
        r"""<div(?=[\s>/])[^>]*class=["'][^"']*(?:post-content|article-content|entry-content|content-body|story-body|article-body)[^"']*["'][^>]*>(.*?)</div\s*>""",
        _FLAGS,
    ),
    re.compile(
        r"""<div(?=[\s>/])[^>]*class=["'][^"']*(?:post|article|entry|story|content)[^"']*["'][^>]*>(.*?)</div\s*>""",
        _FLAGS,
    ),
    re.compile(
        r"""<section(?=[\s>/])[^>]*class=["'][^"']*(?:content|article|post)[^"']*["'][^>]*>(.*?)</section\s*>""",
        _FLAGS,
    ),
]

_PARAGRAPH_RE = re.compile(r"<p(?=[\s>/])[^>]*>(.*?)</p\s*>", _FLAGS)
_TAG_RE = re.compile(r"<[^>]+>")


def _semantic_container(html: str) -> str:
    for pattern in (_ARTICLE_RE, _MAIN_RE):
        match = pattern.search(html)
        if match and match.group(1):
            return match.group(1)
    return ""


def _class_container(html: str) -> str:
    for pattern in _CLASS_PATTERNS:
        match = pattern.search(html)
        if match and len(match.group(1)) > settings.min_class_match_length:
            return match.group(1)
    return ""


def _long_paragraphs(html: str) -> str:
    paragraphs = [
        match.group(0)
        for match in _PARAGRAPH_RE.finditer(html)
        if len(_TAG_RE.sub("", match.group(1)).strip()) > settings.min_paragraph_length
    ]
    return "\n".join(paragraphs)


def locate_main_content(html: str) -> str:
    """Return the raw HTML of the main content of *html*, or ``""``."""
    if not html:
        return ""

    content = _semantic_container(html) or _class_container(html)

    # A short container is not trusted over a page full of long paragraphs.
    if len(content) < settings.min_class_match_length:
        paragraphs = _long_paragraphs(html)
        if paragraphs:
            content = paragraphs

    return content
