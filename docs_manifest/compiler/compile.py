"""Compile one Markdown document into a safe HTML fragment and heading list.

:func:`compile_markdown` is a pure function of its arguments: every call
builds its own context, heading allocator, and state, so independent
documents may be compiled in any order or concurrently.

Example
-------
>>> from docs_manifest.compiler import compile_markdown
>>> result = compile_markdown(
...     "# Title\\n\\nHello [World](./other.md#section)",
...     current_rel_path="a/b.md",
...     current_slug="/a/b",
...     to_slug=lambda rel: "/" + rel.removesuffix(".md"),
... )
>>> result.html
'<p>Hello <a href="#/a/other#section">World</a></p>'
"""

from __future__ import annotations

import typing as typ

from .assets import normalize_assets_base
from .blocks import CompileState, compile_lines
from .models import CompileContext, CompileResult
from .text import normalize_newlines, strip_frontmatter

if typ.TYPE_CHECKING:
    from .models import SlugResolver


def compile_markdown(
    markdown: str,
    *,
    current_rel_path: str,
    current_slug: str,
    to_slug: SlugResolver,
    assets_base: str | None = None,
) -> CompileResult:
    """Compile ``markdown`` for the page at ``current_rel_path``.

    Parameters
    ----------
    markdown : str
        Raw document text, optionally starting with ``---`` frontmatter.
    current_rel_path : str
        POSIX path of the document relative to the input root.
    current_slug : str
        Slug of the document; used for same-page anchors.
    to_slug : SlugResolver
        Resolves a root-relative ``.md`` path to the target page slug.
    assets_base : str, optional
        URL prefix for copied assets. ``None`` or blank disables asset
        rewriting.

    Returns
    -------
    CompileResult
        The HTML fragment (first level-1 heading suppressed as the page
        title) and the depth two-and-deeper headings in document order.
    """
    text = strip_frontmatter(normalize_newlines(markdown))
    ctx = CompileContext(
        current_rel_path=current_rel_path,
        current_slug=current_slug,
        to_slug=to_slug,
        assets_base=normalize_assets_base(assets_base),
    )
    state = CompileState(lines=text.split("\n"), ctx=ctx, title_pending=True)
    html = compile_lines(state)
    return CompileResult(html=html, headings=list(state.headings))


__all__ = ["compile_markdown"]
