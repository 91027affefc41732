"""Convert located article HTML into lightweight readable markup.

The output is plain text with a small set of line-level markers that the
presentation layer re-renders:

    ## / ### / #### / #####   headings (h1, h2, h3, h4-h6)
    • item                    list items
    **bold**  *italic*        inline emphasis

The transformation is an ordered sequence of regex rewrites; later rules
assume the earlier ones have already run.  Readable prose survives; page
chrome, link targets and attributes do not.
"""

from __future__ import annotations

import re

from newsdesk.config import settings
from newsdesk.scraper.entities import decode_entities

_FLAGS = re.IGNORECASE | re.DOTALL

# ---------------------------------------------------------------------------
# Step 1: non-content elements, removed together with their contents
# ---------------------------------------------------------------------------
_EMBED_TAGS = ("script", "style", "noscript", "svg", "iframe", "form")
_CHROME_TAGS = ("nav", "header", "footer", "aside", "button")


def _element_re(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{tag}(?=[\s>/])[^>]*>.*?</{tag}\s*>", _FLAGS)


_EMBED_RES = [_element_re(tag) for tag in _EMBED_TAGS]
_CHROME_RES = [_element_re(tag) for tag in _CHROME_TAGS]
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)

# ---------------------------------------------------------------------------
# Steps 2-5: structural conversions
# ---------------------------------------------------------------------------
_HEADING_RES = [
    (re.compile(r"<h1(?=[\s>/])[^>]*>(.*?)</h1\s*>", _FLAGS), r"\n## \1\n"),
    (re.compile(r"<h2(?=[\s>/])[^>]*>(.*?)</h2\s*>", _FLAGS), r"\n### \1\n"),
    (re.compile(r"<h3(?=[\s>/])[^>]*>(.*?)</h3\s*>", _FLAGS), r"\n#### \1\n"),
    (re.compile(r"<h[4-6](?=[\s>/])[^>]*>(.*?)</h[4-6]\s*>", _FLAGS), r"\n##### \1\n"),
]
_PARAGRAPH_RE = re.compile(r"<p(?=[\s>/])[^>]*>(.*?)</p\s*>", _FLAGS)
_LIST_ITEM_RE = re.compile(r"<li(?=[\s>/])[^>]*>(.*?)</li\s*>", _FLAGS)
_LIST_RE = re.compile(r"</?[uo]l(?=[\s>/])[^>]*>", re.IGNORECASE)
_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_END_RE = re.compile(
    r"</(?:div|section|article|blockquote|figure|tr)\s*>", re.IGNORECASE
)
_LINK_RE = re.compile(r"<a(?=[\s>/])[^>]*>(.*?)</a\s*>", _FLAGS)
_BOLD_RE = re.compile(r"<(strong|b)(?=[\s>/])[^>]*>(.*?)</\1\s*>", _FLAGS)
_ITALIC_RE = re.compile(r"<(em|i)(?=[\s>/])[^>]*>(.*?)</\1\s*>", _FLAGS)
_TAG_RE = re.compile(r"<[^>]+>")

# ---------------------------------------------------------------------------
# Step 8: whitespace
# ---------------------------------------------------------------------------
_BLANK_RUN_RE = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_HSPACE_RE = re.compile(r"[ \t]+")
_LEADING_SPACE_RE = re.compile(r"^[ \t]+", re.MULTILINE)

_MARKER_PREFIXES = ("#", "•", "**")


def strip_non_content(html: str) -> str:
    """Remove scripts, embeds, forms, comments and page chrome entirely."""
    cleaned = html
    for pattern in _EMBED_RES:
        cleaned = pattern.sub("", cleaned)
    cleaned = _COMMENT_RE.sub("", cleaned)
    for pattern in _CHROME_RES:
        cleaned = pattern.sub("", cleaned)
    return cleaned


def convert_structure(html: str) -> str:
    """Rewrite headings, paragraphs, lists, links and emphasis as markers."""
    converted = html
    for pattern, replacement in _HEADING_RES:
        converted = pattern.sub(replacement, converted)

    converted = _PARAGRAPH_RE.sub(r"\n\1\n", converted)
    converted = _LIST_ITEM_RE.sub(r"\n• \1", converted)
    converted = _LIST_RE.sub("\n", converted)
    converted = _BREAK_RE.sub("\n", converted)
    converted = _BLOCK_END_RE.sub("\n", converted)

    converted = _LINK_RE.sub(r"\1", converted)
    converted = _BOLD_RE.sub(r"**\2**", converted)
    converted = _ITALIC_RE.sub(r"*\2*", converted)
    return converted


def collapse_whitespace(text: str) -> str:
    collapsed = _BLANK_RUN_RE.sub("\n\n", text)
    collapsed = _HSPACE_RE.sub(" ", collapsed)
    collapsed = _LEADING_SPACE_RE.sub("", collapsed)
    return collapsed.strip()


def keep_line(line: str) -> bool:
    """Return ``True`` if *line* should survive the low-signal filter.

    Blank lines and marker lines always stay; anything else must be longer
    than ``settings.min_line_length`` characters.
    """
    trimmed = line.strip()
    if not trimmed:
        return True
    if trimmed.startswith(_MARKER_PREFIXES):
        return True
    return len(trimmed) > settings.min_line_length


def filter_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if keep_line(line)).strip()


def normalize_html(raw_html: str) -> str:
    """Turn *raw_html* into plain text with lightweight markup.

    Returns an empty string when nothing readable survives.
    """
    if not raw_html:
        return ""
    text = strip_non_content(raw_html)
    text = convert_structure(text)
    text = _TAG_RE.sub("", text)
    text = decode_entities(text)
    text = collapse_whitespace(text)
    text = filter_lines(text)
    # Dropped lines can leave blank runs behind.
    return _BLANK_RUN_RE.sub("\n\n", text)
