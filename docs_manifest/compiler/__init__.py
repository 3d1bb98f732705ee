"""Minimal, injection-safe Markdown to HTML compiler.

The compiler escapes all text, allows only a tiny raw-HTML subset, sanitizes
every URL, resolves links between documents into page slugs, and rewrites
relative asset references under a configurable assets base.
"""

from .compile import compile_markdown
from .headings import HeadingIdAllocator
from .inline import parse_inline
from .models import CompileContext, CompileResult, HeadingEntry
from .text import escape_html, slugify
from .urls import rewrite_href, safe_url

__all__ = [
    "CompileContext",
    "CompileResult",
    "HeadingEntry",
    "HeadingIdAllocator",
    "compile_markdown",
    "escape_html",
    "parse_inline",
    "rewrite_href",
    "safe_url",
    "slugify",
]
