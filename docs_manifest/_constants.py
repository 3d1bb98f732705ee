"""Common literal values used across docs_manifest.

These constants keep default paths and traversal rules centralized so the
CLI, the configuration loader, the generator, and the tests import the same
values without drifting. Intended for internal use within the package.

Examples
--------
>>> from docs_manifest import _constants
>>> _constants.DEFAULT_ASSETS_BASE
'/docs-assets'
>>> "node_modules" in _constants.SKIP_DIR_NAMES
True
"""

from pathlib import Path

DEFAULT_CONFIG_PATH = Path("config/docs.yaml")
DEFAULT_INPUT_DIR = Path("docs")
DEFAULT_OUT_FILE = Path("src/generated/docs.json")
DEFAULT_ASSETS_DIR = Path("public/docs-assets")
DEFAULT_ASSETS_BASE = "/docs-assets"
DEFAULT_DEBOUNCE_MS = 150

SKIP_DIR_NAMES = frozenset(
    {"node_modules", ".git", "dist", ".vite", "__pycache__", ".venv"}
)

MARKDOWN_SUFFIX = ".md"
INDEX_STEM = "index"
README_STEM = "README"

MAX_BLOCKQUOTE_DEPTH = 32
