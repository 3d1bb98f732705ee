"""URL sanitizing and link rewriting for the hash-routed viewer.

The viewer is a single-page application addressed as ``#/<slug>#<fragment>``.
Links between Markdown documents are rewritten into that route space, links
to copied assets are pointed at the assets base, and every other value is
filtered through a small protocol allow-list.

Examples
--------
>>> from docs_manifest.compiler.urls import safe_url
>>> safe_url("javascript:alert(1)", "href")
''
>>> safe_url("https://example.com", "src")
'https://example.com'
"""

from __future__ import annotations

import posixpath

from .assets import resolve_asset_rel_path, to_asset_url
from .models import CompileContext, HashShorthand, SlugResolver, UrlKind

ALLOWED_SCHEMES = ("http://", "https://", "mailto:")


def safe_url(raw: str, kind: UrlKind) -> str:
    """Return ``raw`` when its scheme is allowed, otherwise ``""``.

    ``href`` values starting with ``#`` or ``/`` are app-internal routes and
    pass through untouched; any other value containing a colon is treated as
    an unknown scheme and dropped.
    """
    value = raw.strip()
    if not value:
        return ""
    if kind == "href" and value.startswith(("#", "/")):
        return value
    lower = value.lower()
    if lower.startswith(ALLOWED_SCHEMES):
        return value
    if ":" in lower:
        return ""
    return value


def parse_link_target(raw: str) -> tuple[str, str | None]:
    """Split ``raw`` on the first ``#`` into path and (non-empty) fragment."""
    path, sep, fragment = raw.strip().partition("#")
    if not sep:
        return path, None
    return path, fragment or None


def resolve_markdown_route(
    target_path: str, current_rel_path: str, to_slug: SlugResolver
) -> str:
    """Resolve a ``.md`` link relative to the current document into a slug."""
    clean = target_path.removeprefix("./").lstrip("/")
    resolved = posixpath.normpath(
        posixpath.join(posixpath.dirname(current_rel_path), clean)
    )
    return to_slug(resolved)


def rewrite_href(target: str, ctx: CompileContext, hash_shorthand: HashShorthand) -> str:
    """Rewrite a link target into the viewer's address space.

    Parameters
    ----------
    target : str
        Raw link target as written in Markdown or in an ``<a href>``.
    ctx : CompileContext
        Context of the compiling document.
    hash_shorthand : {"anchor", "route"}
        How a bare ``#fragment`` is interpreted: ``"anchor"`` (Markdown links)
        keeps it on the current page, ``"route"`` (raw HTML links) treats the
        fragment as a page route.

    Returns
    -------
    str
        Sanitized ``href`` value; ``""`` for rejected schemes.
    """
    value = target.strip()
    if not value:
        return ""
    if value.startswith("#/"):
        return value

    path, fragment = parse_link_target(value)
    href = safe_url(path, "href")

    if href.lower().endswith(".md") and ":" not in href:
        slug = resolve_markdown_route(href, ctx.current_rel_path, ctx.to_slug)
        return f"#{slug}#{fragment}" if fragment else f"#{slug}"

    if href and ctx.assets_base and not href.startswith(("#", "/")):
        resolved = resolve_asset_rel_path(href, ctx)
        if resolved:
            href = to_asset_url(resolved, ctx)
        return f"{href}#{fragment}" if fragment else href

    if not href and fragment:
        if hash_shorthand == "route":
            route = fragment if fragment.startswith("/") else f"/{fragment}"
            return f"#{route}"
        return f"#{ctx.current_slug}#{fragment}"

    if href.startswith("#"):
        return f"#{ctx.current_slug}{href}"

    if href and fragment:
        return f"{href}#{fragment}"
    return href


__all__ = [
    "ALLOWED_SCHEMES",
    "parse_link_target",
    "resolve_markdown_route",
    "rewrite_href",
    "safe_url",
]
