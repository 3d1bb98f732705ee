"""Shared dataclasses and errors used by the manifest pipeline."""

from __future__ import annotations

import dataclasses as dc
import json
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from docs_manifest.compiler.models import HeadingEntry


class GenerationError(RuntimeError):
    """Raised when a generation run cannot start or would be inconsistent."""


class SlugCollisionError(GenerationError):
    """Raised when two documents derive the same page slug."""

    def __init__(self, slug: str, first: str, second: str) -> None:
        self.slug = slug
        self.paths = (first, second)
        super().__init__(
            f"Documents '{first}' and '{second}' both map to slug '{slug}'."
        )


@dc.dataclass(frozen=True, slots=True)
class CompiledPage:
    """One page of the manifest.

    Attributes
    ----------
    slug : str
        Root-rooted route (``/``, ``/guides/setup``).
    title : str
        Page title from frontmatter, the first ``<h1>``/``#`` heading, or
        the humanized file name.
    html : str
        Injection-safe HTML fragment.
    headings : list[HeadingEntry]
        Table-of-contents entries in document order.
    """

    slug: str
    title: str
    html: str
    headings: list[HeadingEntry]

    def as_dict(self) -> dict[str, typ.Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "html": self.html,
            "headings": [heading.as_dict() for heading in self.headings],
        }


@dc.dataclass(frozen=True, slots=True)
class Manifest:
    """Pages sorted by slug using ordinal string comparison."""

    pages: tuple[CompiledPage, ...]

    @classmethod
    def from_pages(cls, pages: typ.Iterable[CompiledPage]) -> Manifest:
        return cls(pages=tuple(sorted(pages, key=lambda page: page.slug)))

    def to_json(self) -> str:
        """Serialize the manifest as indented JSON with a trailing newline."""
        payload = {"pages": [page.as_dict() for page in self.pages]}
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


@dc.dataclass(frozen=True, slots=True)
class GenerationResult:
    """Summary of a completed generation run."""

    input_dir: Path
    out_file: Path
    page_count: int
    asset_count: int


__all__ = [
    "CompiledPage",
    "GenerationError",
    "GenerationResult",
    "Manifest",
    "SlugCollisionError",
]
