"""Typed dataclasses describing docs manifest configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from docs_manifest._constants import (
    DEFAULT_ASSETS_BASE,
    DEFAULT_ASSETS_DIR,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_INPUT_DIR,
    DEFAULT_OUT_FILE,
)


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SlugConfig:
    """Rules for deriving page slugs from file names.

    Attributes
    ----------
    case_insensitive_index : bool
        When ``True``, ``Index.md`` or ``readme.md`` take part in the
        folder-index convention; otherwise only ``index.md`` and
        ``README.md`` do.
    skip_dirs : frozenset[str]
        Directory names skipped in addition to the built-in list.
    """

    case_insensitive_index: bool = False
    skip_dirs: frozenset[str] = frozenset()


@dc.dataclass(slots=True)
class SiteConfig:
    """Resolved settings for one manifest generation run."""

    input_dir: Path = DEFAULT_INPUT_DIR
    out_file: Path = DEFAULT_OUT_FILE
    assets_dir: Path | None = DEFAULT_ASSETS_DIR
    assets_base: str | None = DEFAULT_ASSETS_BASE
    slugs: SlugConfig = dc.field(default_factory=SlugConfig)
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    def with_overrides(
        self,
        *,
        input_dir: Path | None = None,
        out_file: Path | None = None,
        assets_dir: Path | None = None,
        assets_base: str | None = None,
        no_assets: bool = False,
    ) -> SiteConfig:
        """Return a copy with command-line overrides applied.

        ``None`` leaves the configured value in place; ``no_assets`` disables
        both asset copying and asset URL rewriting.
        """
        updated = dc.replace(self)
        if input_dir is not None:
            updated.input_dir = input_dir
        if out_file is not None:
            updated.out_file = out_file
        if assets_dir is not None:
            updated.assets_dir = assets_dir
        if assets_base is not None:
            updated.assets_base = assets_base
        if no_assets:
            updated.assets_dir = None
            updated.assets_base = None
        return updated


__all__ = ["SiteConfig", "SiteConfigError", "SlugConfig"]
