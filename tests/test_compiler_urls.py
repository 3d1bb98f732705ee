"""Unit tests for URL sanitizing, link rewriting, and asset resolution.

The viewer routes pages as ``#/<slug>#<fragment>``; these tests check that
links between documents, same-page anchors, copied assets, and foreign URLs
are each rewritten into that space, and that unsafe schemes and directory
traversal are neutralized.
"""

from __future__ import annotations

import pytest

from docs_manifest.compiler.assets import (
    normalize_assets_base,
    resolve_asset_rel_path,
    rewrite_asset_src,
)
from docs_manifest.compiler.models import AssetRef, CompileContext
from docs_manifest.compiler.urls import parse_link_target, rewrite_href, safe_url
from docs_manifest.generator.discovery import SlugResolver


def _ctx(
    rel_path: str = "page.md",
    slug: str = "/page",
    assets_base: str | None = None,
) -> CompileContext:
    """Build a context whose resolver simply drops the ``.md`` suffix."""
    return CompileContext(
        current_rel_path=rel_path,
        current_slug=slug,
        to_slug=lambda rel: "/" + rel.removesuffix(".md"),
        assets_base=assets_base,
    )


@pytest.mark.parametrize(
    "raw",
    [
        "javascript:alert(1)",
        "JavaScript:alert(1)",
        "data:text/html;base64,PHNjcmlwdD4=",
        "vbscript:msgbox",
        "ftp://example.com/file",
    ],
)
def test_safe_url_rejects_unknown_schemes(raw: str) -> None:
    assert safe_url(raw, "href") == "", f"Expected {raw!r} to be dropped"
    assert safe_url(raw, "src") == "", f"Expected {raw!r} to be dropped"


@pytest.mark.parametrize(
    "raw",
    ["https://example.com", "HTTP://EXAMPLE.COM", "mailto:team@example.com", "img/a.png"],
)
def test_safe_url_keeps_allowed_values(raw: str) -> None:
    assert safe_url(raw, "src") == raw


def test_safe_url_passes_app_routes_for_links_only() -> None:
    """``#`` and ``/`` prefixed values are app routes for hrefs."""
    assert safe_url("#/guide", "href") == "#/guide"
    assert safe_url("/docs/a", "href") == "/docs/a"
    assert safe_url("/x:y", "src") == "", (
        "Image sources containing a colon are treated as schemes"
    )


def test_parse_link_target_splits_on_first_hash() -> None:
    assert parse_link_target("a.md#b#c") == ("a.md", "b#c")
    assert parse_link_target("a.md#") == ("a.md", None)
    assert parse_link_target("a.md") == ("a.md", None)


def test_markdown_links_resolve_relative_to_current_document() -> None:
    ctx = _ctx("a/b.md", "/a/b")
    assert rewrite_href("./other.md#section", ctx, "anchor") == "#/a/other#section"
    assert rewrite_href("../top.md", ctx, "anchor") == "#/top"
    assert rewrite_href("/root.md", ctx, "anchor") == "#/a/root", (
        "Root-prefixed .md links are resolved from the current folder"
    )


def test_markdown_links_use_the_folder_index_convention() -> None:
    resolver = SlugResolver(["index.md", "guide/setup.md", "guide/README.md"])
    ctx = CompileContext("guide/setup.md", "/guide/setup", resolver)
    assert rewrite_href("../index.md", ctx, "anchor") == "#/"
    assert rewrite_href("README.md#install", ctx, "anchor") == "#/guide#install"


def test_absolute_urls_ending_in_md_are_left_alone() -> None:
    url = "https://example.com/docs/README.md"
    assert rewrite_href(url, _ctx(), "anchor") == url, (
        "External Markdown URLs must not be mistaken for local documents"
    )


def test_bare_fragment_depends_on_hash_shorthand() -> None:
    """Markdown anchors stay on the page; raw HTML fragments are routes."""
    ctx = _ctx()
    assert rewrite_href("#intro", ctx, "anchor") == "#/page#intro"
    assert rewrite_href("#guide", ctx, "route") == "#/guide"
    assert rewrite_href("#/guide#setup", ctx, "anchor") == "#/guide#setup"


def test_plain_links_keep_their_fragment() -> None:
    ctx = _ctx()
    assert rewrite_href("https://example.com/a#b", ctx, "anchor") == (
        "https://example.com/a#b"
    )
    assert rewrite_href("/absolute/path", ctx, "anchor") == "/absolute/path"
    assert rewrite_href("javascript:alert(1)", ctx, "anchor") == ""
    assert rewrite_href("   ", ctx, "anchor") == ""


def test_links_to_assets_are_rewritten_under_the_assets_base() -> None:
    ctx = _ctx("guides/a.md", "/guides/a", assets_base="/docs-assets")
    assert rewrite_href("files/manual.pdf#page=2", ctx, "anchor") == (
        "/docs-assets/guides/files/manual.pdf#page=2"
    ), "Expected asset links to keep their fragment"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("/docs-assets/", "/docs-assets"), (" docs-assets ", "docs-assets"), ("  ", None), (None, None)],
)
def test_normalize_assets_base(value: str | None, expected: str | None) -> None:
    assert normalize_assets_base(value) == expected


def test_asset_paths_resolve_against_document_folder() -> None:
    ctx = _ctx("guides/page.md", "/guides/page", assets_base="/docs-assets")
    assert resolve_asset_rel_path("./img/logo.png?v=2", ctx) == AssetRef(
        rel_path="guides/img/logo.png", search="?v=2"
    )
    assert resolve_asset_rel_path("..\\shared\\a.png", ctx) == AssetRef(
        rel_path="shared/a.png", search=""
    ), "Backslashes should be treated as path separators"


@pytest.mark.parametrize(
    "target",
    ["../../escape.txt", "../../../escape.txt", "#frag", "/abs.png", "https://x/y.png", "./"],
)
def test_asset_resolution_rejects_escapes_and_non_relative_targets(target: str) -> None:
    ctx = _ctx("guides/page.md", "/guides/page", assets_base="/docs-assets")
    assert resolve_asset_rel_path(target, ctx) is None, (
        f"Expected {target!r} not to resolve inside the input root"
    )


def test_asset_traversal_falls_through_unrewritten() -> None:
    """A reference escaping the root keeps its original relative URL."""
    ctx = _ctx("a/b/page.md", "/a/b/page", assets_base="/docs-assets")
    assert rewrite_asset_src("../../../escape.txt", ctx) == "../../../escape.txt"
    assert rewrite_asset_src("../../inside.txt", ctx) == "/docs-assets/inside.txt"


def test_asset_rewriting_disabled_without_base() -> None:
    ctx = _ctx("guides/page.md", "/guides/page")
    assert resolve_asset_rel_path("img/logo.png", ctx) is None
    assert rewrite_asset_src("img/logo.png", ctx) == "img/logo.png"
