"""Load and validate docs manifest configuration.

This subpackage parses the optional ``config/docs.yaml`` file into typed
dataclasses (:class:`SiteConfig`, :class:`SlugConfig`) that the generator
and the watch loop consume. Every key is optional; command-line flags
override file values through :meth:`SiteConfig.with_overrides`.

Examples
--------
>>> from pathlib import Path
>>> from docs_manifest.config import load_site_config
>>> site = load_site_config(Path("config/docs.yaml"))  # doctest: +SKIP
>>> site.input_dir  # doctest: +SKIP
PosixPath('docs')
"""

from .loader import build_site_config, load_site_config
from .models import SiteConfig, SiteConfigError, SlugConfig

__all__ = [
    "SiteConfig",
    "SiteConfigError",
    "SlugConfig",
    "build_site_config",
    "load_site_config",
]
