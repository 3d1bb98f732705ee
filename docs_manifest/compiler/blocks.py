"""Block-level compiler loop and its ordered dispatch table.

Each document line is offered to the matchers in :data:`BLOCK_MATCHERS`, in
order; the first matcher that recognizes a construct consumes one or more
lines and returns the HTML to emit. The order is part of the contract: for
example a table is only considered after headings, quotes, lists, and
thematic breaks have all declined the line, and the paragraph matcher always
accepts.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from docs_manifest._constants import MAX_BLOCKQUOTE_DEPTH

from .headings import HeadingIdAllocator
from .html_blocks import align_style, is_html_block_start, parse_html_block
from .inline import parse_inline
from .models import BlockMatch, CompileContext, HeadingEntry
from .tables import is_table_start, parse_table_block
from .text import (
    collapse_inline_whitespace,
    collapse_whitespace,
    escape_attr,
    escape_html,
    is_br_only_line,
    sanitize_lang,
    strip_html_tags,
    strip_inline,
)

logger = logging.getLogger(__name__)

FENCE_PREFIX = "```"
ATX_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*$")
ATX_HEADING_START = re.compile(r"^#{1,6}\s+")
THEMATIC_BREAK_PATTERN = re.compile(r"^(-{3,}|\*{3,}|_{3,})$")
BLOCKQUOTE_PATTERN = re.compile(r"^>\s?")
UNORDERED_ITEM_PATTERN = re.compile(r"^[-*+]\s+")
ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.\s+")


@dc.dataclass(slots=True)
class CompileState:
    """Mutable bookkeeping owned by a single compile call.

    Attributes
    ----------
    lines : list[str]
        Document lines being scanned.
    ctx : CompileContext
        Immutable context for resolving references.
    depth : int
        Blockquote nesting depth; ``0`` for the top-level document.
    allocator : HeadingIdAllocator
        Heading id allocator scoped to this call.
    headings : list[HeadingEntry]
        Table-of-contents entries collected so far.
    title_pending : bool
        ``True`` until the first level-1 heading has been suppressed; only
        ever set for the top-level document.
    """

    lines: list[str]
    ctx: CompileContext
    depth: int = 0
    allocator: HeadingIdAllocator = dc.field(default_factory=HeadingIdAllocator)
    headings: list[HeadingEntry] = dc.field(default_factory=list)
    title_pending: bool = False


BlockMatcher = typ.Callable[[CompileState, int], BlockMatch | None]


def starts_structural_block(trimmed: str) -> bool:
    """Return ``True`` when a fence, heading, quote, list, or rule starts here."""
    return (
        trimmed.startswith(FENCE_PREFIX)
        or ATX_HEADING_START.match(trimmed) is not None
        or BLOCKQUOTE_PATTERN.match(trimmed) is not None
        or UNORDERED_ITEM_PATTERN.match(trimmed) is not None
        or ORDERED_ITEM_PATTERN.match(trimmed) is not None
        or THEMATIC_BREAK_PATTERN.match(trimmed) is not None
    )


def _interrupts_paragraph(lines: list[str], index: int) -> bool:
    trimmed = lines[index].strip()
    return (
        not trimmed
        or is_br_only_line(trimmed)
        or is_html_block_start(trimmed)
        or is_table_start(lines, index)
        or starts_structural_block(trimmed)
    )


def _match_blank(state: CompileState, index: int) -> BlockMatch | None:
    trimmed = state.lines[index].strip()
    if not trimmed or is_br_only_line(trimmed):
        return BlockMatch(html=None, next_index=index + 1)
    return None


def _match_fenced_code(state: CompileState, index: int) -> BlockMatch | None:
    trimmed = state.lines[index].strip()
    if not trimmed.startswith(FENCE_PREFIX):
        return None
    lang = sanitize_lang(trimmed[len(FENCE_PREFIX) :].strip())
    cursor = index + 1
    body: list[str] = []
    while cursor < len(state.lines) and not state.lines[cursor].strip().startswith(
        FENCE_PREFIX
    ):
        body.append(state.lines[cursor])
        cursor += 1
    # An unterminated fence runs to the end of the document.
    if cursor < len(state.lines):
        cursor += 1
    code = escape_html("\n".join(body))
    cls = f' class="language-{escape_attr(lang)}"' if lang else ""
    html = f"<pre><code{cls}>{code}</code></pre>"
    return BlockMatch(html=html, next_index=cursor)


def _heading_html(depth: int, heading_id: str | None, style: str, inner: str) -> str:
    id_attr = f' id="{escape_attr(heading_id)}"' if heading_id else ""
    return f"<h{depth}{id_attr}{style}>{inner}</h{depth}>"


def _record_heading(
    state: CompileState, depth: int, text: str, *, require_text: bool
) -> tuple[bool, str | None]:
    """Allocate an id and apply the title rule.

    Returns ``(suppressed, heading_id)``.
    """
    if require_text and not text:
        return False, None
    heading_id = state.allocator.allocate(text)
    if depth == 1 and state.title_pending:
        state.title_pending = False
        return True, heading_id
    if depth >= 2:
        state.headings.append(HeadingEntry(depth=depth, id=heading_id, text=text))
    return False, heading_id


def _match_html_block(state: CompileState, index: int) -> BlockMatch | None:
    block = parse_html_block(state.lines, index)
    if block is None:
        return None

    style = align_style(block.align)
    inner = collapse_inline_whitespace(block.inner)
    if block.tag_name == "p":
        html = f"<p{style}>{parse_inline(inner, state.ctx)}</p>" if inner else None
        return BlockMatch(html=html, next_index=block.next_index)

    depth = int(block.tag_name[1])
    text = collapse_whitespace(strip_inline(strip_html_tags(inner)))
    suppressed, heading_id = _record_heading(state, depth, text, require_text=True)
    if suppressed:
        return BlockMatch(html=None, next_index=block.next_index)
    html = _heading_html(depth, heading_id, style, parse_inline(inner, state.ctx))
    return BlockMatch(html=html, next_index=block.next_index)


def _match_atx_heading(state: CompileState, index: int) -> BlockMatch | None:
    match = ATX_HEADING_PATTERN.match(state.lines[index].strip())
    if match is None:
        return None
    depth = len(match.group(1))
    raw_text = match.group(2)
    text = strip_inline(raw_text).strip()
    suppressed, heading_id = _record_heading(state, depth, text, require_text=False)
    if suppressed:
        return BlockMatch(html=None, next_index=index + 1)
    html = _heading_html(depth, heading_id, "", parse_inline(raw_text, state.ctx))
    return BlockMatch(html=html, next_index=index + 1)


def _match_thematic_break(state: CompileState, index: int) -> BlockMatch | None:
    if THEMATIC_BREAK_PATTERN.match(state.lines[index].strip()) is None:
        return None
    return BlockMatch(html="<hr />", next_index=index + 1)


def _match_blockquote(state: CompileState, index: int) -> BlockMatch | None:
    if BLOCKQUOTE_PATTERN.match(state.lines[index].strip()) is None:
        return None
    quoted: list[str] = []
    cursor = index
    while cursor < len(state.lines):
        trimmed = state.lines[cursor].strip()
        if BLOCKQUOTE_PATTERN.match(trimmed) is None:
            break
        quoted.append(BLOCKQUOTE_PATTERN.sub("", trimmed, count=1))
        cursor += 1

    if state.depth + 1 >= MAX_BLOCKQUOTE_DEPTH:
        logger.debug(
            "blockquote nesting limit reached in %s", state.ctx.current_rel_path
        )
        text = " ".join(line.strip() for line in quoted if line.strip())
        inner = f"<p>{parse_inline(text, state.ctx)}</p>" if text else ""
        return BlockMatch(html=f"<blockquote>{inner}</blockquote>", next_index=cursor)

    nested_ctx = dc.replace(state.ctx)
    nested = CompileState(lines=quoted, ctx=nested_ctx, depth=state.depth + 1)
    inner_html = compile_lines(nested)
    return BlockMatch(html=f"<blockquote>{inner_html}</blockquote>", next_index=cursor)


def _list_matcher(pattern: re.Pattern[str], tag: str) -> BlockMatcher:
    def _match(state: CompileState, index: int) -> BlockMatch | None:
        if pattern.match(state.lines[index].strip()) is None:
            return None
        items: list[str] = []
        cursor = index
        while cursor < len(state.lines):
            trimmed = state.lines[cursor].strip()
            if pattern.match(trimmed) is None:
                break
            content = pattern.sub("", trimmed, count=1)
            items.append(f"<li>{parse_inline(content, state.ctx)}</li>")
            cursor += 1
        return BlockMatch(html=f"<{tag}>{''.join(items)}</{tag}>", next_index=cursor)

    return _match


def _match_table(state: CompileState, index: int) -> BlockMatch | None:
    return parse_table_block(state.lines, index, state.ctx, starts_structural_block)


def _match_paragraph(state: CompileState, index: int) -> BlockMatch:
    # The first line is always consumed so a line that merely looks like a
    # block start (an unclosed <p>, say) is escaped instead of stalling.
    collected = [state.lines[index]]
    cursor = index + 1
    while cursor < len(state.lines) and not _interrupts_paragraph(state.lines, cursor):
        collected.append(state.lines[cursor])
        cursor += 1
    text = " ".join(collected).strip()
    html = f"<p>{parse_inline(text, state.ctx)}</p>" if text else None
    return BlockMatch(html=html, next_index=cursor)


BLOCK_MATCHERS: tuple[tuple[str, BlockMatcher], ...] = (
    ("blank", _match_blank),
    ("fenced_code", _match_fenced_code),
    ("html_block", _match_html_block),
    ("atx_heading", _match_atx_heading),
    ("thematic_break", _match_thematic_break),
    ("blockquote", _match_blockquote),
    ("unordered_list", _list_matcher(UNORDERED_ITEM_PATTERN, "ul")),
    ("ordered_list", _list_matcher(ORDERED_ITEM_PATTERN, "ol")),
    ("table", _match_table),
    ("paragraph", _match_paragraph),
)


def compile_lines(state: CompileState) -> str:
    """Run the dispatch loop over ``state.lines`` and return the joined HTML."""
    html: list[str] = []
    index = 0
    while index < len(state.lines):
        for _name, matcher in BLOCK_MATCHERS:
            matched = matcher(state, index)
            if matched is not None:
                break
        else:  # pragma: no cover - the paragraph matcher always accepts
            matched = BlockMatch(html=None, next_index=index + 1)
        if matched.html is not None:
            html.append(matched.html)
        index = matched.next_index
    return "\n".join(html)


__all__ = [
    "BLOCK_MATCHERS",
    "BlockMatcher",
    "CompileState",
    "compile_lines",
    "starts_structural_block",
]
