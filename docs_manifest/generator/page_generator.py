"""High-level orchestration for docs manifest generation.

This module enumerates a docs tree, compiles every Markdown document with
:func:`~docs_manifest.compiler.compile_markdown`, copies non-Markdown assets
into the public assets directory, and writes the JSON manifest consumed by
the viewer. It exposes :class:`ManifestGenerator`, which consumes a
:class:`~docs_manifest.config.SiteConfig`, and the :func:`generate`
convenience wrapper.

The whole run is a single unit: pages are compiled and assets copied before
the manifest is written, and the manifest itself is written to a temporary
file that replaces the destination only once complete. A failing run
therefore never leaves a partial manifest behind and never disturbs the one
from the previous successful run.

Example
-------
>>> from pathlib import Path
>>> from docs_manifest.config import SiteConfig
>>> from docs_manifest.generator import ManifestGenerator
>>> config = SiteConfig(input_dir=Path("docs"))  # doctest: +SKIP
>>> ManifestGenerator(config).run()  # doctest: +SKIP
GenerationResult(input_dir=PosixPath('/repo/docs'), ...)
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import typing as typ
from pathlib import Path, PurePosixPath

from docs_manifest.compiler import compile_markdown
from docs_manifest.compiler.assets import normalize_assets_base
from docs_manifest.config import SiteConfig
from docs_manifest.generator.discovery import (
    SlugResolver,
    list_asset_files,
    list_markdown_files,
)
from docs_manifest.generator.models import (
    CompiledPage,
    GenerationError,
    GenerationResult,
    Manifest,
    SlugCollisionError,
)
from docs_manifest.generator.titles import extract_title, humanize_filename

logger = logging.getLogger(__name__)

MANIFEST_MODE = 0o644


class ManifestGenerator:
    """Compile a docs tree into a sorted page manifest."""

    def __init__(self, config: SiteConfig) -> None:
        """Initialize the generator and validate its directories.

        Parameters
        ----------
        config : SiteConfig
            Resolved configuration for this run.

        Raises
        ------
        GenerationError
            When the assets directory lies inside the input directory, which
            would make every run copy its own previous output.
        """
        self.config = config
        self.input_dir = config.input_dir.resolve()
        self.out_file = config.out_file.resolve()
        self.assets_base = normalize_assets_base(config.assets_base)
        self.assets_dir = config.assets_dir.resolve() if config.assets_dir else None
        if self.assets_dir is not None and (
            self.assets_dir == self.input_dir
            or self.assets_dir.is_relative_to(self.input_dir)
        ):
            msg = (
                "assets_dir must not be inside input_dir "
                f"(the copy would recurse into itself): {config.assets_dir}"
            )
            raise GenerationError(msg)

    def run(self) -> GenerationResult:
        """Compile every page, copy assets, and write the manifest.

        Returns
        -------
        GenerationResult
            Absolute input and output paths plus page and asset counts.

        Raises
        ------
        GenerationError
            When the input directory is missing or two documents share a
            slug.
        OSError
            On any read, copy, or write failure; the previous manifest is
            left untouched.
        """
        manifest = self.build_manifest()
        asset_count = self._copy_assets()
        self._write_manifest(manifest)
        logger.info(
            "generated %d page(s) from %s (assets: %d)",
            len(manifest.pages),
            self.input_dir,
            asset_count,
        )
        return GenerationResult(
            input_dir=self.input_dir,
            out_file=self.out_file,
            page_count=len(manifest.pages),
            asset_count=asset_count,
        )

    def build_manifest(self) -> Manifest:
        """Compile every Markdown document without touching the output paths."""
        if not self.input_dir.is_dir():
            msg = f"Input directory '{self.config.input_dir}' does not exist."
            raise GenerationError(msg)

        rel_paths = list_markdown_files(
            self.input_dir, skip_dirs=self.config.slugs.skip_dirs
        )
        resolver = SlugResolver(
            rel_paths, case_insensitive_index=self.config.slugs.case_insensitive_index
        )
        slugs = self._assign_slugs(rel_paths, resolver)
        pages = [
            self._compile_page(rel_path, slug, resolver)
            for rel_path, slug in slugs.items()
        ]
        return Manifest.from_pages(pages)

    @staticmethod
    def _assign_slugs(
        rel_paths: list[str], resolver: SlugResolver
    ) -> dict[str, str]:
        """Return ``rel_path -> slug``, rejecting documents that share a slug."""
        owners: dict[str, str] = {}
        assigned: dict[str, str] = {}
        for rel_path in rel_paths:
            slug = resolver(rel_path)
            if slug in owners:
                raise SlugCollisionError(slug, owners[slug], rel_path)
            owners[slug] = rel_path
            assigned[rel_path] = slug
        return assigned

    def _compile_page(
        self, rel_path: str, slug: str, resolver: SlugResolver
    ) -> CompiledPage:
        source = self.input_dir / rel_path
        markdown = source.read_text(encoding="utf-8")
        title = extract_title(markdown, humanize_filename(PurePosixPath(rel_path).name))
        compiled = compile_markdown(
            markdown,
            current_rel_path=rel_path,
            current_slug=slug,
            to_slug=resolver,
            assets_base=self.assets_base,
        )
        logger.debug("compiled %s -> %s", rel_path, slug)
        return CompiledPage(
            slug=slug, title=title, html=compiled.html, headings=compiled.headings
        )

    def _copy_assets(self) -> int:
        """Copy non-Markdown files byte-for-byte under the assets directory."""
        if self.assets_dir is None or not self.assets_base:
            return 0
        count = 0
        for rel_path in list_asset_files(
            self.input_dir, skip_dirs=self.config.slugs.skip_dirs
        ):
            destination = self.assets_dir / rel_path
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.input_dir / rel_path, destination)
            logger.debug("copied asset %s", rel_path)
            count += 1
        return count

    def _write_manifest(self, manifest: Manifest) -> None:
        """Atomically replace the manifest file with ``manifest``."""
        self.out_file.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=self.out_file.parent, prefix=f".{self.out_file.name}.", suffix=".tmp"
        )
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(manifest.to_json())
            temp_path.chmod(MANIFEST_MODE)
            os.replace(temp_path, self.out_file)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise


def generate(
    *,
    input_dir: Path,
    out_file: Path,
    assets_dir: Path | None = None,
    assets_base: str | None = None,
    **config_overrides: typ.Any,
) -> GenerationResult:
    """Run one generation with explicit paths.

    Parameters
    ----------
    input_dir : Path
        Docs folder to compile.
    out_file : Path
        Destination of the JSON manifest.
    assets_dir : Path, optional
        Directory receiving copied assets; ``None`` disables copying.
    assets_base : str, optional
        URL prefix for rewritten asset references; ``None`` disables
        rewriting and copying.
    **config_overrides
        Additional :class:`SiteConfig` fields (``slugs``, ``debounce_ms``).

    Returns
    -------
    GenerationResult
        Summary of the completed run.
    """
    config = SiteConfig(
        input_dir=input_dir,
        out_file=out_file,
        assets_dir=assets_dir,
        assets_base=assets_base,
        **config_overrides,
    )
    return ManifestGenerator(config).run()


__all__ = ["ManifestGenerator", "generate"]
