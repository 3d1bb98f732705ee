"""Inline Markdown parsing: emphasis, code, links, images, and safe HTML.

The parser walks a single forward cursor over the text. At each position it
tries the known constructs in a fixed order; anything that does not match,
including every unknown ``<``, is escaped one character at a time. Unknown or
malformed markup therefore degrades to literal text instead of leaking into
the output.

Examples
--------
>>> from docs_manifest.compiler.inline import parse_inline
>>> from docs_manifest.compiler.models import CompileContext
>>> ctx = CompileContext("page.md", "/page", lambda p: "/" + p[:-3])
>>> parse_inline("**bold** <script>", ctx)
'<strong>bold</strong> &lt;script&gt;'
"""

from __future__ import annotations

import typing as typ

from .assets import rewrite_asset_src
from .attributes import parse_tag
from .text import escape_attr, escape_html, is_br_only_line
from .urls import rewrite_href, safe_url

if typ.TYPE_CHECKING:
    from .models import CompileContext


class _Step(typ.NamedTuple):
    html: str
    end: int


def _image_html(src_raw: str, alt: str, ctx: CompileContext) -> str:
    src = rewrite_asset_src(safe_url(src_raw, "src"), ctx)
    return f'<img src="{escape_attr(src)}" alt="{escape_attr(alt)}" loading="lazy" />'


def _delimited(
    text: str, pos: int, delimiter: str, ctx: CompileContext, tag: str
) -> _Step | None:
    end = text.find(delimiter, pos + len(delimiter))
    if end == -1:
        return None
    inner = text[pos + len(delimiter) : end]
    return _Step(f"<{tag}>{parse_inline(inner, ctx)}</{tag}>", end + len(delimiter))


def _code_span(text: str, pos: int) -> _Step | None:
    end = text.find("`", pos + 1)
    if end == -1:
        return None
    return _Step(f"<code>{escape_html(text[pos + 1 : end])}</code>", end + 1)


def _bracket_target(text: str, open_bracket: int) -> tuple[str, str, int] | None:
    """Return ``(label, target, end)`` for ``[label](target)`` at ``open_bracket``."""
    close_bracket = text.find("]", open_bracket + 1)
    if close_bracket == -1 or text[close_bracket + 1 : close_bracket + 2] != "(":
        return None
    close_paren = text.find(")", close_bracket + 2)
    if close_paren == -1:
        return None
    label = text[open_bracket + 1 : close_bracket]
    target = text[close_bracket + 2 : close_paren]
    return label, target, close_paren + 1


def _markdown_image(text: str, pos: int, ctx: CompileContext) -> _Step | None:
    parts = _bracket_target(text, pos + 1)
    if parts is None:
        return None
    alt, target, end = parts
    return _Step(_image_html(target, alt, ctx), end)


def _markdown_link(text: str, pos: int, ctx: CompileContext) -> _Step | None:
    parts = _bracket_target(text, pos)
    if parts is None:
        return None
    label, target, end = parts
    href = rewrite_href(target, ctx, "anchor")
    return _Step(f'<a href="{escape_attr(href)}">{parse_inline(label, ctx)}</a>', end)


def _raw_html(text: str, pos: int, ctx: CompileContext) -> _Step | None:
    tag_end = text.find(">", pos)
    if tag_end == -1:
        return None
    raw_tag = text[pos : tag_end + 1]
    after = tag_end + 1

    if is_br_only_line(raw_tag):
        return _Step("<br />", after)

    tag = parse_tag(raw_tag)
    if tag is None:
        return None

    if tag.closing:
        if tag.name == "span":
            return _Step("", after)
        return None

    match tag.name:
        case "img":
            return _Step(_image_html(tag.get("src") or "", tag.get("alt") or "", ctx), after)
        case "a":
            close = text.lower().find("</a>", after)
            if close == -1:
                return None
            href = rewrite_href(tag.get("href") or "", ctx, "route")
            inner = parse_inline(text[after:close], ctx)
            return _Step(f'<a href="{escape_attr(href)}">{inner}</a>', close + len("</a>"))
        case "span":
            close = text.lower().find("</span>", after)
            if close == -1:
                return _Step("", after)
            return _Step(parse_inline(text[after:close], ctx), close + len("</span>"))
        case _:
            return None


def _try_constructs(text: str, pos: int, ctx: CompileContext) -> _Step | None:
    char = text[pos]
    if text.startswith("**", pos):
        # An unmatched "**" stays literal instead of opening an empty <em>.
        return _delimited(text, pos, "**", ctx, "strong") or _Step("**", pos + 2)
    if char == "*":
        return _delimited(text, pos, "*", ctx, "em")
    if char == "`":
        return _code_span(text, pos)
    if text.startswith("![", pos):
        step = _markdown_image(text, pos, ctx)
        if step is not None:
            return step
    if char == "[":
        return _markdown_link(text, pos, ctx)
    if char == "<":
        return _raw_html(text, pos, ctx)
    return None


def parse_inline(text: str, ctx: CompileContext) -> str:
    """Render inline Markdown in ``text`` to safe HTML.

    Parameters
    ----------
    text : str
        A line, joined paragraph, or table cell.
    ctx : CompileContext
        Context used to rewrite link and image targets.

    Returns
    -------
    str
        HTML in which every character outside recognized constructs is
        escaped.
    """
    out: list[str] = []
    pos = 0
    while pos < len(text):
        step = _try_constructs(text, pos, ctx)
        if step is None:
            out.append(escape_html(text[pos]))
            pos += 1
            continue
        out.append(step.html)
        pos = step.end
    return "".join(out)


__all__ = ["parse_inline"]
