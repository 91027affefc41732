"""HTML character reference decoding."""

from __future__ import annotations

import re
from html.entities import html5

# Named references with a fixed, reader-friendly replacement.  Anything not
# listed here is resolved through the HTML5 table.
_NAMED = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "hellip": "...",
    "mdash": "—",
    "ndash": "–",
    "lsquo": "'",
    "rsquo": "'",
    "ldquo": '"',
    "rdquo": '"',
}

_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[a-zA-Z][a-zA-Z0-9]*);")


def _replace(match: re.Match[str]) -> str:
    ref = match.group(1)
    if ref.startswith("#"):
        try:
            codepoint = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:], 10)
        except ValueError:
            return match.group(0)
        if codepoint == 0:
            return "\ufffd"
        # Surrogates cannot be encoded on their own.
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            return match.group(0)
        return chr(codepoint)

    if ref in _NAMED:
        return _NAMED[ref]
    lowered = ref.lower()
    if lowered in _NAMED:
        return _NAMED[lowered]
    return html5.get(f"{ref};", match.group(0))


def decode_entities(text: str) -> str:
    """Decode named, decimal and hexadecimal character references in *text*.

    A single pass is made over the input, so ``&amp;lt;`` becomes ``&lt;``
    rather than ``<``.  Unknown, out-of-range and surrogate references are
    left as-is; ``&#0;`` becomes U+FFFD.
    """
    if not text or "&" not in text:
        return text
    return _ENTITY_RE.sub(_replace, text)
