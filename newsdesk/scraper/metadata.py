"""Page metadata: title, description, hero image and site name."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from newsdesk.scraper.entities import decode_entities
from newsdesk.scraper.models import PageMetadata

_TITLE_RE = re.compile(r"<title(?=[\s>/])[^>]*>([^<]*)</title\s*>", re.IGNORECASE)
_META_RE = re.compile(r"<meta(?=[\s>/])[^>]*>", re.IGNORECASE)


def _attr_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"""(?<![\w-]){name}\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE
    )


_PROPERTY_RE = _attr_re("property")
_NAME_RE = _attr_re("name")
_CONTENT_RE = _attr_re("content")


def _attr(tag: str, pattern: re.Pattern[str]) -> str | None:
    match = pattern.search(tag)
    if match is None:
        return None
    return match.group(1) if match.group(1) is not None else match.group(2)


def _meta_content(html: str, *, prop: str | None = None, name: str | None = None) -> str:
    """Return the ``content`` of the first matching ``<meta>`` tag, or ``""``.

    Attribute order inside the tag does not matter.
    """
    for match in _META_RE.finditer(html):
        tag = match.group(0)
        if prop is not None:
            key = _attr(tag, _PROPERTY_RE)
            wanted = prop
        else:
            key = _attr(tag, _NAME_RE)
            wanted = name
        if key is None or key.strip().lower() != wanted:
            continue
        content = _attr(tag, _CONTENT_RE)
        if content:
            return content.strip()
    return ""


def extract_title(html: str) -> str:
    match = _TITLE_RE.search(html)
    return match.group(1).strip() if match else ""


def hostname_of(url: str) -> str:
    return urlparse(url).hostname or ""


def extract_metadata(html: str, request_url: str) -> PageMetadata:
    """Pull metadata out of *html*, preferring Open Graph tags.

    Precedence per field:

    - title: ``og:title`` → ``<title>`` → ``"Untitled"``
    - description: ``og:description`` → ``<meta name="description">`` → ``""``
    - image: ``og:image`` → ``""``
    - site name: ``og:site_name`` → hostname of *request_url*
    """
    title = _meta_content(html, prop="og:title") or extract_title(html) or "Untitled"
    description = (
        _meta_content(html, prop="og:description")
        or _meta_content(html, name="description")
    )
    image = _meta_content(html, prop="og:image")
    site_name = _meta_content(html, prop="og:site_name") or hostname_of(request_url)

    return PageMetadata(
        title=decode_entities(title),
        description=decode_entities(description),
        image=decode_entities(image),
        site_name=decode_entities(site_name),
    )
