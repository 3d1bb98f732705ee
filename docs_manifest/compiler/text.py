"""Text helpers used across the Markdown compiler.

Everything that reaches the emitted HTML through an untrusted path goes
through :func:`escape_html`; the remaining helpers derive plain text for
heading ids, titles, and table-of-contents labels.

Examples
--------
>>> from docs_manifest.compiler.text import escape_html, slugify
>>> escape_html('<a href="x">')
'&lt;a href=&quot;x&quot;&gt;'
>>> slugify("Q&A: Setup")
'q-and-a-setup'
"""

from __future__ import annotations

import re

_ESCAPES = {
    ord("&"): "&amp;",
    ord("<"): "&lt;",
    ord(">"): "&gt;",
    ord('"'): "&quot;",
    ord("'"): "&#39;",
}

FRONTMATTER_PATTERN = re.compile(r"\A---\s*\n.*?\n---\s*\n", re.DOTALL)
BR_ONLY_PATTERN = re.compile(r"^</?br\s*/?>$", re.IGNORECASE)
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
WHITESPACE_PATTERN = re.compile(r"\s+")
INLINE_NEWLINE_PATTERN = re.compile(r"\s*\n\s*")
LANG_PATTERN = re.compile(r"[^a-z0-9-]", re.IGNORECASE)

_SLUG_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")

_INLINE_MARKUP = (
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
)


def escape_html(value: str) -> str:
    """Replace ``& < > " '`` with their HTML entities."""
    return value.translate(_ESCAPES)


escape_attr = escape_html


def normalize_newlines(text: str) -> str:
    """Convert Windows line endings to ``\\n``."""
    return text.replace("\r\n", "\n")


def strip_frontmatter(markdown: str) -> str:
    """Drop a leading ``---`` delimited frontmatter block, if present."""
    return FRONTMATTER_PATTERN.sub("", markdown, count=1)


def slugify(text: str) -> str:
    """Convert heading text into a fragment-safe identifier.

    Parameters
    ----------
    text : str
        Heading text (already stripped of Markdown syntax).

    Returns
    -------
    str
        Lowercase hyphenated slug, or ``"section"`` when nothing survives
        the character filter.
    """
    lowered = text.strip().lower().replace("&", " and ")
    cleaned = _SLUG_DISALLOWED.sub("", lowered)
    cleaned = _SLUG_SEPARATORS.sub("-", cleaned).strip("-")
    return cleaned or "section"


def strip_inline(text: str) -> str:
    """Remove inline Markdown markup, keeping the visible text."""
    for pattern, replacement in _INLINE_MARKUP:
        text = pattern.sub(replacement, text)
    return text


def strip_html_tags(value: str) -> str:
    return HTML_TAG_PATTERN.sub("", value)


def collapse_whitespace(value: str) -> str:
    """Collapse every whitespace run into a single space and trim."""
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def collapse_inline_whitespace(value: str) -> str:
    """Join wrapped lines into one, keeping intra-line spacing intact."""
    return INLINE_NEWLINE_PATTERN.sub(" ", value).strip()


def is_br_only_line(trimmed: str) -> bool:
    return BR_ONLY_PATTERN.match(trimmed) is not None


def sanitize_lang(lang: str) -> str:
    """Reduce a fence info string to ``[a-zA-Z0-9-]`` characters."""
    return LANG_PATTERN.sub("", lang)


__all__ = [
    "collapse_inline_whitespace",
    "collapse_whitespace",
    "escape_attr",
    "escape_html",
    "is_br_only_line",
    "normalize_newlines",
    "sanitize_lang",
    "slugify",
    "strip_frontmatter",
    "strip_html_tags",
    "strip_inline",
]
