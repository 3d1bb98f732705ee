"""Asset URL rewriting for images, PDFs, and other copied files.

The generator can copy non-Markdown files out of the docs folder into a
public assets directory. When an assets base is configured, relative
references are resolved against the compiling document's directory and
rewritten to point at that base.

Examples
--------
>>> from docs_manifest.compiler.assets import resolve_asset_rel_path, to_asset_url
>>> from docs_manifest.compiler.models import CompileContext
>>> ctx = CompileContext("guides/page.md", "/guides/page", str, "docs-assets")
>>> ref = resolve_asset_rel_path("./img/logo.png?v=2", ctx)
>>> to_asset_url(ref, ctx)
'docs-assets/guides/img/logo.png?v=2'
"""

from __future__ import annotations

import posixpath

from .models import AssetRef, CompileContext


def normalize_assets_base(value: str | None) -> str | None:
    """Trim ``value`` and drop one trailing slash; blank bases disable rewriting.

    Both absolute (``/docs-assets``, served from the site root) and relative
    (``docs-assets``, served next to the built site) bases are allowed.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return None
    return trimmed[:-1] if trimmed.endswith("/") else trimmed


def _split_search(raw: str) -> tuple[str, str]:
    path, sep, query = raw.partition("?")
    return path, f"{sep}{query}"


def resolve_asset_rel_path(target: str, ctx: CompileContext) -> AssetRef | None:
    """Resolve ``target`` to a path relative to the input root.

    Parameters
    ----------
    target : str
        Reference as written in the document (already scheme-filtered).
    ctx : CompileContext
        Context of the compiling document; its directory anchors the lookup.

    Returns
    -------
    AssetRef or None
        ``None`` when rewriting is disabled, when ``target`` is a fragment,
        root-absolute, or carries a scheme, or when the normalized path
        escapes the input root.
    """
    if not ctx.assets_base:
        return None

    normalized = target.strip().replace("\\", "/")
    if not normalized or normalized.startswith(("#", "/")) or ":" in normalized:
        return None

    pathname, search = _split_search(normalized)
    clean = pathname.removeprefix("./")
    if not clean:
        return None

    resolved = posixpath.normpath(
        posixpath.join(posixpath.dirname(ctx.current_rel_path), clean)
    )
    if posixpath.isabs(resolved):
        return None
    if resolved in {".", ".."} or resolved.startswith("../"):
        return None

    rel_path = resolved.lstrip("/")
    if not rel_path:
        return None
    return AssetRef(rel_path=rel_path, search=search)


def to_asset_url(resolved: AssetRef, ctx: CompileContext) -> str:
    """Join the assets base with a resolved asset path and its query."""
    base = ctx.assets_base or ""
    return f"{base}/{resolved.rel_path}{resolved.search}"


def rewrite_asset_src(src: str, ctx: CompileContext) -> str:
    """Return the asset URL for ``src`` or ``src`` itself when unresolvable."""
    resolved = resolve_asset_rel_path(src, ctx)
    return to_asset_url(resolved, ctx) if resolved else src


__all__ = [
    "normalize_assets_base",
    "resolve_asset_rel_path",
    "rewrite_asset_src",
    "to_asset_url",
]
