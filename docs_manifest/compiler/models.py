"""Shared dataclasses used by the Markdown compiler."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

SlugResolver = typ.Callable[[str], str]
UrlKind = typ.Literal["href", "src"]
HashShorthand = typ.Literal["anchor", "route"]
TableAlign = typ.Literal["left", "right", "center"] | None


@dc.dataclass(frozen=True, slots=True)
class HeadingEntry:
    """Table-of-contents entry for a heading of depth two or more.

    Attributes
    ----------
    depth : int
        Heading level (``2`` through ``6``).
    id : str
        Fragment identifier, unique within the page.
    text : str
        Plain-text heading label.
    """

    depth: int
    id: str
    text: str

    def as_dict(self) -> dict[str, typ.Any]:
        """Return the JSON-ready mapping used in the manifest."""
        return {"depth": self.depth, "id": self.id, "text": self.text}


@dc.dataclass(frozen=True, slots=True)
class CompileContext:
    """Immutable per-call bundle used to resolve relative references.

    Attributes
    ----------
    current_rel_path : str
        POSIX path of the compiling document relative to the input root.
    current_slug : str
        Slug assigned to the compiling document.
    to_slug : SlugResolver
        Maps a root-relative Markdown path to its page slug.
    assets_base : str or None
        URL prefix for copied assets; ``None`` disables asset rewriting.
    """

    current_rel_path: str
    current_slug: str
    to_slug: SlugResolver
    assets_base: str | None = None


@dc.dataclass(frozen=True, slots=True)
class CompileResult:
    """HTML fragment and heading list produced for one document."""

    html: str
    headings: list[HeadingEntry]


@dc.dataclass(frozen=True, slots=True)
class AssetRef:
    """Root-relative asset path plus its preserved query string."""

    rel_path: str
    search: str


@dc.dataclass(frozen=True, slots=True)
class HtmlBlock:
    """An allow-listed ``<h1>``-``<h6>`` or ``<p>`` block lifted from source."""

    tag_name: str
    align: str | None
    inner: str
    next_index: int


@dc.dataclass(frozen=True, slots=True)
class BlockMatch:
    """Result of a block matcher: emitted HTML (if any) and the next line."""

    html: str | None
    next_index: int


__all__ = [
    "AssetRef",
    "BlockMatch",
    "CompileContext",
    "CompileResult",
    "HashShorthand",
    "HeadingEntry",
    "HtmlBlock",
    "SlugResolver",
    "TableAlign",
    "UrlKind",
]
