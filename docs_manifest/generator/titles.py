r"""Derive page titles from document text or file names.

Example
-------
>>> from docs_manifest.generator.titles import extract_title, humanize_filename
>>> extract_title("---\ntitle: 'Hello'\n---\n# Ignored", "Fallback")
'Hello'
>>> humanize_filename("getting_started-guide.md")
'Getting started guide'
"""

from __future__ import annotations

import re

from docs_manifest.compiler.text import collapse_whitespace, normalize_newlines

FRONTMATTER_BLOCK = re.compile(r"\A---\s*\n(.*?)\n---\s*\n", re.DOTALL)
HTML_H1_PATTERN = re.compile(r"<h1\b[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
ATX_H1_PATTERN = re.compile(r"^#\s+(.+?)\s*$", re.MULTILINE)
TAG_PATTERN = re.compile(r"<[^>]*>")
QUOTE_EDGES = re.compile(r"^['\"]|['\"]$")
FILENAME_SEPARATORS = re.compile(r"[-_]+")
MARKDOWN_SUFFIX = re.compile(r"\.md$", re.IGNORECASE)


def _frontmatter_title(markdown: str) -> str | None:
    match = FRONTMATTER_BLOCK.match(markdown)
    if match is None:
        return None
    for line in match.group(1).split("\n"):
        stripped = line.strip()
        if stripped.lower().startswith("title:"):
            value = QUOTE_EDGES.sub("", stripped[len("title:") :].strip()).strip()
            return value or None
    return None


def _without_code_fences(markdown: str) -> str:
    """Drop fenced code so headings inside samples are never taken as titles."""
    kept: list[str] = []
    in_fence = False
    for line in markdown.split("\n"):
        if line.strip().startswith("```"):
            in_fence = not in_fence
            continue
        if not in_fence:
            kept.append(line)
    return "\n".join(kept)


def extract_title(markdown: str, fallback: str) -> str:
    """Return the page title for ``markdown``.

    Precedence: a ``title:`` field in leading ``---`` frontmatter, the first
    HTML ``<h1>`` with non-empty text, the first ATX ``# heading``, and
    finally ``fallback``.
    """
    text = normalize_newlines(markdown)
    title = _frontmatter_title(text)
    if title:
        return title

    body = _without_code_fences(text)
    for match in HTML_H1_PATTERN.finditer(body):
        flattened = collapse_whitespace(TAG_PATTERN.sub(" ", match.group(1)))
        if flattened:
            return flattened

    heading = ATX_H1_PATTERN.search(body)
    if heading is not None:
        return heading.group(1).strip()
    return fallback


def humanize_filename(file_name: str) -> str:
    """Turn ``getting-started.md`` into ``Getting started``."""
    base = MARKDOWN_SUFFIX.sub("", file_name)
    spaced = FILENAME_SEPARATORS.sub(" ", base)
    if not spaced:
        return base
    return spaced[0].upper() + spaced[1:]


__all__ = ["extract_title", "humanize_filename"]
