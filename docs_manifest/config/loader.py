"""Load docs manifest configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from docs_manifest._constants import (
    DEFAULT_ASSETS_BASE,
    DEFAULT_ASSETS_DIR,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_INPUT_DIR,
    DEFAULT_OUT_FILE,
)

from .models import SiteConfig, SiteConfigError, SlugConfig

_UNSET = object()


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing one docs tree.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML file (for example ``config/docs.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for missing keys.
        Relative paths are kept relative to the working directory.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If a field has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docs_manifest.config import load_site_config
    >>> config = load_site_config(Path("config/docs.yaml"))  # doctest: +SKIP
    >>> config.assets_base  # doctest: +SKIP
    '/docs-assets'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return build_site_config(loaded)


def build_site_config(raw: typ.Mapping[str, typ.Any]) -> SiteConfig:
    """Build a :class:`SiteConfig` from an already-parsed mapping."""
    assets = _section(raw, "assets")
    slugs = _section(raw, "slugs")
    watch = _section(raw, "watch")

    assets_dir = assets.get("dir", _UNSET)
    assets_base = assets.get("base", _UNSET)

    skip_dirs = slugs.get("skip_dirs") or []
    if not isinstance(skip_dirs, list):
        msg = "'slugs.skip_dirs' must be a list of directory names."
        raise SiteConfigError(msg)

    case_insensitive_index = slugs.get("case_insensitive_index", False)
    if not isinstance(case_insensitive_index, bool):
        msg = "'slugs.case_insensitive_index' must be true or false."
        raise SiteConfigError(msg)

    debounce_ms = watch.get("debounce_ms", DEFAULT_DEBOUNCE_MS)
    if not isinstance(debounce_ms, int) or isinstance(debounce_ms, bool) or debounce_ms < 0:
        msg = "'watch.debounce_ms' must be a non-negative integer."
        raise SiteConfigError(msg)

    return SiteConfig(
        input_dir=_path(raw.get("input_dir"), DEFAULT_INPUT_DIR, "input_dir"),
        out_file=_path(raw.get("out_file"), DEFAULT_OUT_FILE, "out_file"),
        assets_dir=(
            DEFAULT_ASSETS_DIR
            if assets_dir is _UNSET
            else _optional_path(assets_dir, "assets.dir")
        ),
        assets_base=(
            DEFAULT_ASSETS_BASE
            if assets_base is _UNSET
            else _optional_str(assets_base)
        ),
        slugs=SlugConfig(
            case_insensitive_index=case_insensitive_index,
            skip_dirs=frozenset(str(name).strip() for name in skip_dirs if str(name).strip()),
        ),
        debounce_ms=debounce_ms,
    )


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the nested mapping under ``key`` (empty when absent)."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _path(value: object | None, default: Path, key: str) -> Path:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        msg = f"'{key}' must be a non-empty path string."
        raise SiteConfigError(msg)
    return Path(value.strip())


def _optional_path(value: object | None, key: str) -> Path | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _path(value, Path(), key)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["build_site_config", "load_site_config"]
