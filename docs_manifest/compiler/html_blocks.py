"""Allow-listed HTML block parsing (``<h1>``-``<h6>`` and ``<p>``).

Many docs are copied from READMEs that use HTML for centred logos and
taglines. Only these two block shapes are recognized; their attributes are
discarded except for ``align``.
"""

from __future__ import annotations

import re

from .attributes import parse_tag
from .models import HtmlBlock

START_TAG_PATTERN = re.compile(r"^<(h[1-6]|p)\b[^>]*>", re.IGNORECASE)
ALIGN_VALUES = frozenset({"left", "right", "center"})


def is_html_block_start(trimmed: str) -> bool:
    return START_TAG_PATTERN.match(trimmed) is not None


def align_style(align: str | None) -> str:
    """Return an inline ``style`` attribute for a supported ``align`` value."""
    value = (align or "").strip().lower()
    if value in ALIGN_VALUES:
        return f' style="text-align: {value}"'
    return ""


def parse_html_block(lines: list[str], start: int) -> HtmlBlock | None:
    """Match an HTML block starting at ``lines[start]``.

    The block may span several lines and ends at the first matching close
    tag (compared case-insensitively). Text after the close tag on the same
    line is discarded.

    Returns
    -------
    HtmlBlock or None
        ``None`` when the line is not an allow-listed start tag or the close
        tag never appears; the caller then treats the text as a paragraph so
        it is escaped.
    """
    trimmed = lines[start].lstrip()
    match = START_TAG_PATTERN.match(trimmed)
    if match is None:
        return None

    start_tag = match.group(0)
    tag = parse_tag(start_tag)
    tag_name = match.group(1).lower()
    align = tag.get("align") if tag is not None else None
    close_tag = f"</{tag_name}>"

    parts: list[str] = []
    segment = trimmed[len(start_tag) :]
    index = start
    while index < len(lines):
        close_at = segment.lower().find(close_tag)
        if close_at != -1:
            parts.append(segment[:close_at])
            return HtmlBlock(
                tag_name=tag_name,
                align=align,
                inner="\n".join(parts),
                next_index=index + 1,
            )
        parts.append(segment)
        index += 1
        if index < len(lines):
            segment = lines[index]
    return None


__all__ = ["align_style", "is_html_block_start", "parse_html_block"]
