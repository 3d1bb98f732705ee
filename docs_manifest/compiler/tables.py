"""GitHub-style pipe table support.

Examples
--------
>>> from docs_manifest.compiler.tables import split_table_row
>>> split_table_row(r"| `a|b` | c \\| d |")
['`a|b`', 'c | d']
"""

from __future__ import annotations

import re
import typing as typ

from .inline import parse_inline
from .models import BlockMatch

if typ.TYPE_CHECKING:
    from .models import CompileContext, TableAlign

SEPARATOR_CELL_PATTERN = re.compile(r"^:?-{3,}:?$")


def split_table_row(line: str) -> list[str]:
    """Split a table row into trimmed cell texts.

    One leading and one trailing ``|`` are stripped. Pipes inside code spans
    or escaped as ``\\|`` do not split cells; escaped pipes are unescaped in
    the returned text.
    """
    trimmed = line.strip()
    if "|" not in trimmed:
        return []

    inner = trimmed.removeprefix("|")
    inner = inner.removesuffix("|")

    cells: list[str] = []
    current: list[str] = []
    in_code = False
    previous = ""
    for char in inner:
        if char == "`" and previous != "\\":
            in_code = not in_code
        elif char == "|" and not in_code and previous != "\\":
            cells.append("".join(current).strip())
            current = []
            previous = char
            continue
        current.append(char)
        previous = char
    cells.append("".join(current).strip())
    return [cell.replace("\\|", "|") for cell in cells]


def _is_separator_line(line: str) -> bool:
    cells = split_table_row(line)
    return bool(cells) and all(SEPARATOR_CELL_PATTERN.match(cell) for cell in cells)


def parse_alignment(separator_cell: str) -> TableAlign:
    """Map ``:---``/``---:``/``:---:`` markers to a column alignment."""
    cell = separator_cell.strip()
    left = cell.startswith(":")
    right = cell.endswith(":")
    if left and right:
        return "center"
    if right:
        return "right"
    if left:
        return "left"
    return None


def is_table_start(lines: list[str], index: int) -> bool:
    """Return ``True`` when ``lines[index]`` opens a pipe table."""
    if index + 1 >= len(lines):
        return False
    header = lines[index].strip()
    separator = lines[index + 1].strip()
    if not header or not separator or "|" not in header:
        return False
    if not _is_separator_line(separator):
        return False
    header_cells = split_table_row(header)
    if not header_cells or len(header_cells) != len(split_table_row(separator)):
        return False
    return any(cell.strip() for cell in header_cells)


def _cell_html(tag: str, text: str, align: TableAlign, ctx: CompileContext) -> str:
    style = f' style="text-align: {align}"' if align else ""
    return f"<{tag}{style}>{parse_inline(text, ctx)}</{tag}>"


def parse_table_block(
    lines: list[str],
    start: int,
    ctx: CompileContext,
    stops_row: typ.Callable[[str], bool],
) -> BlockMatch | None:
    """Render the table starting at ``lines[start]``.

    Parameters
    ----------
    lines : list[str]
        Document lines.
    start : int
        Index of the header row.
    ctx : CompileContext
        Context used for inline parsing of every cell.
    stops_row : Callable[[str], bool]
        Predicate over a trimmed line that reports whether another block
        construct starts there, ending the table body.

    Returns
    -------
    BlockMatch or None
        ``None`` when no table starts at ``start``.
    """
    if not is_table_start(lines, start):
        return None

    header_cells = split_table_row(lines[start])
    alignments = [parse_alignment(cell) for cell in split_table_row(lines[start + 1])]
    column_count = len(header_cells)

    rows: list[list[str]] = []
    index = start + 2
    while index < len(lines):
        trimmed = lines[index].strip()
        if not trimmed or "|" not in trimmed or stops_row(trimmed):
            break
        cells = split_table_row(lines[index])[:column_count]
        cells.extend([""] * (column_count - len(cells)))
        rows.append(cells)
        index += 1

    header_html = "".join(
        _cell_html("th", cell, alignments[idx], ctx)
        for idx, cell in enumerate(header_cells)
    )
    body_html = "".join(
        "<tr>"
        + "".join(
            _cell_html("td", cell, alignments[idx], ctx) for idx, cell in enumerate(row)
        )
        + "</tr>"
        for row in rows
    )
    html = (
        f"<table><thead><tr>{header_html}</tr></thead>"
        f"<tbody>{body_html}</tbody></table>"
    )
    return BlockMatch(html=html, next_index=index)


__all__ = [
    "is_table_start",
    "parse_alignment",
    "parse_table_block",
    "split_table_row",
]
