"""Unit tests for the compiler's text helpers and heading id allocation.

These tests pin down escaping, slug derivation, inline-markup stripping, and
the per-page heading id allocator that every heading in a compiled document
passes through.

Usage
-----
Run ``pytest tests/test_compiler_text.py -v``.
"""

from __future__ import annotations

import pytest

from docs_manifest.compiler.headings import HeadingIdAllocator
from docs_manifest.compiler.text import (
    collapse_inline_whitespace,
    collapse_whitespace,
    escape_html,
    is_br_only_line,
    normalize_newlines,
    sanitize_lang,
    slugify,
    strip_frontmatter,
    strip_html_tags,
    strip_inline,
)


def test_escape_html_covers_all_special_characters() -> None:
    """All five HTML-significant characters should be replaced by entities."""
    actual = escape_html("<a href=\"x\" title='y'>&</a>")
    assert actual == (
        "&lt;a href=&quot;x&quot; title=&#39;y&#39;&gt;&amp;&lt;/a&gt;"
    ), "Expected every special character to be escaped"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Getting Started", "getting-started"),
        ("Q&A: Setup", "q-and-a-setup"),
        ("  snake_case   words ", "snakecase-words"),
        ("--Leading and trailing--", "leading-and-trailing"),
        ("日本語", "section"),
        ("", "section"),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    """Slugs should be lowercase, hyphenated, and never empty."""
    assert slugify(text) == expected, f"Unexpected slug for {text!r}"


def test_strip_inline_keeps_visible_text() -> None:
    """Inline Markdown syntax should be removed, leaving the readable text."""
    text = "Use `cfg` with **bold**, *em*, ![alt](x.png) and [link](y.md)"
    assert strip_inline(text) == "Use cfg with bold, em, alt and link", (
        "Expected markup to be stripped from heading text"
    )


def test_frontmatter_is_stripped_only_at_document_start() -> None:
    """A leading ``---`` block is dropped; later rules are left alone."""
    assert strip_frontmatter("---\ntitle: X\n---\nBody\n") == "Body\n"
    untouched = "Intro\n---\nkey: value\n---\n"
    assert strip_frontmatter(untouched) == untouched, (
        "Frontmatter must only be recognised at the start of the document"
    )


def test_normalize_newlines() -> None:
    assert normalize_newlines("a\r\nb\r\n") == "a\nb\n"


def test_whitespace_helpers() -> None:
    """Block-level collapsing differs from inline joining of wrapped lines."""
    assert collapse_whitespace("  a \n\t b  ") == "a b"
    assert collapse_inline_whitespace("\n  a   b\n   c \n") == "a   b c", (
        "Expected intra-line spacing to survive while line breaks are joined"
    )
    assert strip_html_tags("<b>bold</b> <i>text</i>") == "bold text"


@pytest.mark.parametrize("line", ["<br>", "<br/>", "<BR />", "</br>"])
def test_br_only_lines(line: str) -> None:
    assert is_br_only_line(line), f"Expected {line!r} to be a break-only line"


def test_sanitize_lang_drops_unsafe_characters() -> None:
    assert sanitize_lang('js" onload="x') == "jsonloadx"
    assert sanitize_lang("C-Sharp") == "C-Sharp"


def test_heading_ids_are_numbered_in_document_order() -> None:
    """Three identical headings should be numbered from the second repeat."""
    allocator = HeadingIdAllocator()
    ids = [allocator.allocate("Setup") for _ in range(3)]
    assert ids == ["setup", "setup-2", "setup-3"], (
        "Expected the Nth repeat of a heading to gain a -N suffix"
    )


def test_heading_ids_skip_suffixes_already_taken() -> None:
    """A heading literally named ``A 2`` must not collide with a repeat suffix."""
    allocator = HeadingIdAllocator()
    ids = [allocator.allocate(text) for text in ("A", "A 2", "A")]
    assert ids == ["a", "a-2", "a-3"], "Expected allocated ids to stay unique"
    assert len(set(ids)) == len(ids)


def test_heading_allocators_are_independent() -> None:
    first = HeadingIdAllocator()
    second = HeadingIdAllocator()
    first.allocate("Intro")
    assert second.allocate("Intro") == "intro", (
        "A fresh allocator must not inherit ids from another compile call"
    )
