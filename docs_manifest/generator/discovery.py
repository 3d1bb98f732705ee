"""Enumerate docs trees and derive page slugs from relative paths.

Examples
--------
>>> from docs_manifest.generator.discovery import SlugResolver
>>> resolve = SlugResolver(["index.md", "guide/README.md", "api/index.md", "api/README.md"])
>>> [resolve(p) for p in ["index.md", "guide/README.md", "api/README.md", "a/b.md"]]
['/', '/guide', '/api/README', '/a/b']
"""

from __future__ import annotations

import posixpath
import re
import typing as typ

from docs_manifest._constants import (
    INDEX_STEM,
    MARKDOWN_SUFFIX,
    README_STEM,
    SKIP_DIR_NAMES,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

MARKDOWN_SUFFIX_PATTERN = re.compile(r"\.md$", re.IGNORECASE)


def is_markdown_name(name: str) -> bool:
    return name.lower().endswith(MARKDOWN_SUFFIX)


def iter_tree(
    root: Path, *, skip_dirs: cabc.Collection[str] = frozenset()
) -> cabc.Iterator[str]:
    """Yield POSIX paths of every file below ``root``, relative to it.

    Symlinks, dot-prefixed entries, and directories named in
    :data:`SKIP_DIR_NAMES` or ``skip_dirs`` are skipped, so the walk never
    leaves ``root``. Entries are visited in sorted order so runs are
    reproducible; ``OSError`` propagates to the caller.
    """
    skipped = SKIP_DIR_NAMES | frozenset(skip_dirs)
    pending = [root]
    while pending:
        current = pending.pop()
        subdirs: list[Path] = []
        for entry in sorted(current.iterdir(), key=lambda item: item.name):
            if entry.name.startswith(".") or entry.is_symlink():
                continue
            if entry.is_dir():
                if entry.name not in skipped:
                    subdirs.append(entry)
                continue
            if entry.is_file():
                yield entry.relative_to(root).as_posix()
        pending.extend(reversed(subdirs))


def list_markdown_files(
    root: Path, *, skip_dirs: cabc.Collection[str] = frozenset()
) -> list[str]:
    return [rel for rel in iter_tree(root, skip_dirs=skip_dirs) if is_markdown_name(rel)]


def list_asset_files(
    root: Path, *, skip_dirs: cabc.Collection[str] = frozenset()
) -> list[str]:
    return [
        rel for rel in iter_tree(root, skip_dirs=skip_dirs) if not is_markdown_name(rel)
    ]


class SlugResolver:
    """Map root-relative Markdown paths to page slugs.

    The resolver is a read-only view over the whole document set so any
    document can link to any other regardless of compile order. A file named
    ``index`` collapses to its folder's route; ``README`` does the same only
    when the folder has no ``index`` document. Every other path keeps its
    extension-less form.

    Parameters
    ----------
    rel_paths : Iterable[str]
        POSIX paths of every Markdown document, relative to the input root.
    case_insensitive_index : bool, optional
        Match ``index``/``README`` regardless of case. Defaults to ``False``.
    """

    def __init__(
        self, rel_paths: cabc.Iterable[str], *, case_insensitive_index: bool = False
    ) -> None:
        self.case_insensitive_index = case_insensitive_index
        index_dirs: set[str] = set()
        for rel in rel_paths:
            folder, _, name = self._strip_suffix(rel).rpartition("/")
            if self._is_stem(name, INDEX_STEM):
                index_dirs.add(folder)
        self._index_dirs = frozenset(index_dirs)

    def __call__(self, rel_path: str) -> str:
        without_ext = self._strip_suffix(rel_path)
        folder, _, name = without_ext.rpartition("/")
        if self._is_stem(name, INDEX_STEM) or (
            self._is_stem(name, README_STEM) and folder not in self._index_dirs
        ):
            route = folder
        else:
            route = without_ext
        slug = f"/{route}".rstrip("/")
        return slug or "/"

    @staticmethod
    def _strip_suffix(rel_path: str) -> str:
        posix = posixpath.normpath(rel_path.replace("\\", "/"))
        return MARKDOWN_SUFFIX_PATTERN.sub("", posix)

    def _is_stem(self, name: str, stem: str) -> bool:
        if self.case_insensitive_index:
            return name.lower() == stem.lower()
        return name == stem


__all__ = [
    "SlugResolver",
    "is_markdown_name",
    "iter_tree",
    "list_asset_files",
    "list_markdown_files",
]
