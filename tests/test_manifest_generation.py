"""Integration tests for manifest generation.

These tests build small docs trees under ``tmp_path``, run the generator, and
decode the written manifest with ``msgspec`` to check page order, titles,
rewritten links, asset copies, and the all-or-nothing write behaviour.

Usage
-----
Run ``pytest tests/test_manifest_generation.py -v``.
"""

from __future__ import annotations

import os
import typing as typ

import msgspec
import pytest

from docs_manifest.config import SiteConfig
from docs_manifest.generator import (
    GenerationError,
    ManifestGenerator,
    SlugCollisionError,
    generate,
)
from docs_manifest.generator import page_generator

if typ.TYPE_CHECKING:
    from pathlib import Path


class Heading(msgspec.Struct):
    depth: int
    id: str
    text: str


class Page(msgspec.Struct):
    slug: str
    title: str
    html: str
    headings: list[Heading]


class ManifestDoc(msgspec.Struct):
    pages: list[Page]


def _write(root: Path, rel_path: str, content: str | bytes) -> None:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


def _read_manifest(path: Path) -> ManifestDoc:
    return msgspec.json.decode(path.read_bytes(), type=ManifestDoc)


@pytest.fixture
def site(tmp_path: Path) -> dict[str, Path]:
    """Create a docs tree with nested pages, a README folder, and an image."""
    docs = tmp_path / "docs"
    _write(
        docs,
        "index.md",
        "# Home\n\nSee [setup](guide/setup.md#install) ![logo](img/logo.png)\n",
    )
    _write(docs, "guide/setup.md", "---\ntitle: Setup Guide\n---\n## Install\n\nRun it.\n")
    _write(docs, "reference/README.md", "Reference overview.\n")
    _write(docs, "getting-started.md", "No heading here.\n")
    _write(docs, "img/logo.png", b"\x89PNG\r\n\x1a\nfake")
    return {
        "docs": docs,
        "out_file": tmp_path / "src" / "generated" / "docs.json",
        "assets_dir": tmp_path / "public" / "docs-assets",
    }


def test_generate_writes_sorted_manifest(site: dict[str, Path]) -> None:
    result = generate(
        input_dir=site["docs"],
        out_file=site["out_file"],
        assets_dir=site["assets_dir"],
        assets_base="/docs-assets",
    )
    assert result.page_count == 4
    assert result.asset_count == 1
    assert result.out_file == site["out_file"].resolve()

    manifest = _read_manifest(site["out_file"])
    assert [page.slug for page in manifest.pages] == [
        "/",
        "/getting-started",
        "/guide/setup",
        "/reference",
    ], "Expected pages sorted by slug"
    titles = {page.slug: page.title for page in manifest.pages}
    assert titles == {
        "/": "Home",
        "/getting-started": "Getting started",
        "/guide/setup": "Setup Guide",
        "/reference": "README",
    }


def test_generate_rewrites_links_and_copies_assets(site: dict[str, Path]) -> None:
    generate(
        input_dir=site["docs"],
        out_file=site["out_file"],
        assets_dir=site["assets_dir"],
        assets_base="/docs-assets",
    )
    pages = {page.slug: page for page in _read_manifest(site["out_file"]).pages}
    home = pages["/"]
    assert "<h1" not in home.html, "The title heading belongs in the title field"
    assert '<a href="#/guide/setup#install">setup</a>' in home.html
    assert 'src="/docs-assets/img/logo.png"' in home.html
    assert pages["/guide/setup"].headings == [
        Heading(depth=2, id="install", text="Install")
    ]
    copied = site["assets_dir"] / "img" / "logo.png"
    assert copied.read_bytes() == (site["docs"] / "img" / "logo.png").read_bytes()


def test_manifest_file_format(site: dict[str, Path]) -> None:
    _write(site["docs"], "cafe.md", "# Café\n")
    generate(input_dir=site["docs"], out_file=site["out_file"])
    raw = site["out_file"].read_text(encoding="utf-8")
    assert raw.startswith('{\n  "pages": [\n'), "Expected indented JSON"
    assert raw.endswith("}\n"), "Expected a trailing newline"
    assert '"title": "Café"' in raw, "Non-ASCII text should be written as-is"
    assert (site["out_file"].stat().st_mode & 0o777) == page_generator.MANIFEST_MODE


def test_disabled_assets_leave_references_alone(site: dict[str, Path]) -> None:
    config = SiteConfig(input_dir=site["docs"], out_file=site["out_file"]).with_overrides(
        no_assets=True
    )
    result = ManifestGenerator(config).run()
    assert result.asset_count == 0
    assert not site["assets_dir"].exists()
    home = next(
        page for page in _read_manifest(site["out_file"]).pages if page.slug == "/"
    )
    assert 'src="img/logo.png"' in home.html


def test_slug_collision_aborts_before_writing(site: dict[str, Path]) -> None:
    _write(site["docs"], "foo.md", "# Foo\n")
    _write(site["docs"], "foo/index.md", "# Foo index\n")
    site["out_file"].parent.mkdir(parents=True)
    site["out_file"].write_text("previous\n", encoding="utf-8")

    with pytest.raises(SlugCollisionError) as excinfo:
        generate(input_dir=site["docs"], out_file=site["out_file"])

    assert excinfo.value.slug == "/foo"
    assert set(excinfo.value.paths) == {"foo.md", "foo/index.md"}
    assert site["out_file"].read_text(encoding="utf-8") == "previous\n", (
        "A failed run must leave the previous manifest untouched"
    )


def test_failed_write_keeps_previous_manifest(
    site: dict[str, Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    site["out_file"].parent.mkdir(parents=True)
    site["out_file"].write_text("previous\n", encoding="utf-8")

    def _fail_replace(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
        msg = "disk full"
        raise OSError(msg)

    monkeypatch.setattr(page_generator.os, "replace", _fail_replace)
    with pytest.raises(OSError, match="disk full"):
        generate(input_dir=site["docs"], out_file=site["out_file"])

    assert site["out_file"].read_text(encoding="utf-8") == "previous\n"
    leftovers = [p.name for p in site["out_file"].parent.iterdir()]
    assert leftovers == ["docs.json"], "Temporary files must be cleaned up"


def test_missing_input_directory(tmp_path: Path) -> None:
    with pytest.raises(GenerationError, match="does not exist"):
        generate(input_dir=tmp_path / "missing", out_file=tmp_path / "out.json")
    assert not (tmp_path / "out.json").exists()


def test_assets_dir_inside_input_is_rejected(site: dict[str, Path]) -> None:
    config = SiteConfig(
        input_dir=site["docs"],
        out_file=site["out_file"],
        assets_dir=site["docs"] / "public",
    )
    with pytest.raises(GenerationError, match="must not be inside"):
        ManifestGenerator(config)


def test_build_manifest_does_not_touch_outputs(site: dict[str, Path]) -> None:
    config = SiteConfig(
        input_dir=site["docs"],
        out_file=site["out_file"],
        assets_dir=site["assets_dir"],
    )
    manifest = ManifestGenerator(config).build_manifest()
    assert len(manifest.pages) == 4
    assert not site["out_file"].exists()
    assert not site["assets_dir"].exists()


def test_symlinked_folders_are_never_published(
    site: dict[str, Path], tmp_path: Path
) -> None:
    outside = tmp_path / "outside"
    _write(outside, "id_rsa", "secret")
    _write(outside, "index.md", "# Leaked\n")
    (site["docs"] / "linked").symlink_to(outside, target_is_directory=True)
    (site["docs"] / "loop").symlink_to(site["docs"], target_is_directory=True)

    result = generate(
        input_dir=site["docs"],
        out_file=site["out_file"],
        assets_dir=site["assets_dir"],
        assets_base="/docs-assets",
    )

    assert result.page_count == 4, "Linked folders must not add pages"
    assert result.asset_count == 1
    assert not (site["assets_dir"] / "linked").exists(), (
        "Files outside the docs root must never be copied to the assets folder"
    )
