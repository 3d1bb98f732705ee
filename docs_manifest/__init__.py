"""Compile a folder of Markdown docs into a JSON page manifest.

This package exposes the CLI entry points used by ``docs-manifest generate``
and ``docs-manifest watch`` together with the library functions they wrap.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``compile_markdown``: Compile one document into HTML and headings.
- ``generate``: Run one manifest generation with explicit paths.

Examples
--------
>>> from docs_manifest import main
>>> main()  # doctest: +SKIP
>>> from docs_manifest import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main
from .compiler import compile_markdown
from .generator import generate

__all__ = ["app", "compile_markdown", "generate", "main"]
