"""Cyclopts CLI entrypoint for generating the docs page manifest.

The ``docs-manifest`` console script defined here compiles a folder of
Markdown documents into the JSON manifest consumed by the docs viewer, and
can keep that manifest up to date while the docs are being edited. Typical
usage runs ``docs-manifest generate`` in CI before bundling the viewer and
``docs-manifest watch`` next to the viewer's dev server.

Examples
--------
Generate the manifest for the default configuration:

>>> from docs_manifest.cli import main
>>> main()  # doctest: +SKIP

Compile a different docs folder without copying assets:

>>> from docs_manifest.cli import app
>>> app(["generate", "--input", "handbook", "--no-assets"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_PATH
from .config import SiteConfig, load_site_config
from .generator import GenerationResult, ManifestGenerator
from .watcher import watch_docs

app = App(name="docs-manifest", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

InputOption = typ.Annotated[
    Path | None,
    Parameter(name=["--input", "--docs"], help="Docs folder", env_var="INPUT_DOCS"),
]
ConfigOption = typ.Annotated[
    Path | None,
    Parameter(
        help="Path to docs config (defaults to config/docs.yaml when present)",
        env_var="INPUT_CONFIG",
    ),
]
OutFileOption = typ.Annotated[
    Path | None,
    Parameter(help="Output manifest file", env_var="INPUT_OUT_FILE"),
]
AssetsDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Copy non-Markdown files here", env_var="INPUT_ASSETS_DIR"),
]
AssetsBaseOption = typ.Annotated[
    str | None,
    Parameter(help="URL prefix for copied assets", env_var="INPUT_ASSETS_BASE"),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def resolve_config(
    config: Path | None,
    *,
    input_dir: Path | None = None,
    out_file: Path | None = None,
    assets_dir: Path | None = None,
    assets_base: str | None = None,
    no_assets: bool = False,
) -> SiteConfig:
    """Load the configuration file (if any) and apply command-line overrides.

    An explicitly named ``config`` must exist; the default location is only
    read when present.
    """
    if config is not None:
        base = load_site_config(config)
    elif DEFAULT_CONFIG_PATH.exists():
        base = load_site_config(DEFAULT_CONFIG_PATH)
    else:
        base = SiteConfig()
    return base.with_overrides(
        input_dir=input_dir,
        out_file=out_file,
        assets_dir=assets_dir,
        assets_base=assets_base,
        no_assets=no_assets,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _report(result: GenerationResult) -> None:
    print(
        f"wrote {_format_path(result.out_file)} "
        f"({result.page_count} page(s), {result.asset_count} asset(s))"
    )


@app.command(help="Compile the docs folder into the page manifest.")
def generate(
    *,
    input_dir: InputOption = None,
    config: ConfigOption = None,
    out_file: OutFileOption = None,
    assets_dir: AssetsDirOption = None,
    assets_base: AssetsBaseOption = None,
    no_assets: bool = False,
    verbose: bool = False,
) -> None:
    """Generate the manifest once.

    Parameters
    ----------
    input_dir : Path or None, optional
        Docs folder; overrides ``input_dir`` from the config file.
    config : Path or None, optional
        Path to the YAML config. When ``None`` the default
        ``config/docs.yaml`` is used if it exists.
    out_file : Path or None, optional
        Manifest destination; overrides ``out_file`` from the config file.
    assets_dir : Path or None, optional
        Directory receiving copied assets.
    assets_base : str or None, optional
        URL prefix used when rewriting relative asset references.
    no_assets : bool, optional
        Disable asset copying and asset URL rewriting.
    verbose : bool, optional
        Log every compiled page and copied asset.

    Raises
    ------
    GenerationError
        If the input folder is missing, the assets folder lies inside it, or
        two documents share a slug.
    OSError
        If any read, copy, or write fails. No partial manifest is written.
    """
    _configure_logging(verbose)
    site_config = resolve_config(
        config,
        input_dir=input_dir,
        out_file=out_file,
        assets_dir=assets_dir,
        assets_base=assets_base,
        no_assets=no_assets,
    )
    _report(ManifestGenerator(site_config).run())


@app.command(help="Regenerate the page manifest whenever the docs change.")
def watch(
    *,
    input_dir: InputOption = None,
    config: ConfigOption = None,
    out_file: OutFileOption = None,
    assets_dir: AssetsDirOption = None,
    assets_base: AssetsBaseOption = None,
    no_assets: bool = False,
    verbose: bool = False,
) -> None:
    """Generate the manifest, then keep regenerating it until interrupted.

    Failed runs are reported and the watcher keeps going; the previous
    manifest stays in place until a run succeeds.
    """
    _configure_logging(verbose)
    site_config = resolve_config(
        config,
        input_dir=input_dir,
        out_file=out_file,
        assets_dir=assets_dir,
        assets_base=assets_base,
        no_assets=no_assets,
    )
    print(f"watching {_format_path(site_config.input_dir.resolve())}")

    def _on_error(exc: Exception) -> None:
        print(f"generation failed: {exc}")

    watch_docs(site_config, on_result=_report, on_error=_on_error)


def main() -> None:
    """Invoke the Cyclopts application that powers the `docs-manifest` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
