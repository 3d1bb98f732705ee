"""Per-page heading id allocation."""

from __future__ import annotations

import dataclasses as dc

from .text import slugify


@dc.dataclass(slots=True)
class HeadingIdAllocator:
    """Hand out heading ids that are unique within one page.

    The first heading with a given slug receives the bare slug; the Nth
    repeat receives ``<slug>-N``. Suffixes skip ids already taken by a
    heading whose own text slugifies to ``<slug>-N``. One allocator belongs
    to exactly one compile call and is never shared with nested blockquote
    compiles.

    Examples
    --------
    >>> allocator = HeadingIdAllocator()
    >>> [allocator.allocate("Setup") for _ in range(3)]
    ['setup', 'setup-2', 'setup-3']
    """

    _counts: dict[str, int] = dc.field(default_factory=dict)
    _used: set[str] = dc.field(default_factory=set)

    def allocate(self, text: str) -> str:
        base = slugify(text)
        seen = self._counts.get(base, 0)
        candidate = base if seen == 0 else f"{base}-{seen + 1}"
        while candidate in self._used:
            seen += 1
            candidate = f"{base}-{seen + 1}"
        self._counts[base] = seen + 1
        self._used.add(candidate)
        return candidate


__all__ = ["HeadingIdAllocator"]
