"""Utilities for discovering, compiling, and writing the docs page manifest."""

from .discovery import SlugResolver
from .models import (
    CompiledPage,
    GenerationError,
    GenerationResult,
    Manifest,
    SlugCollisionError,
)
from .page_generator import ManifestGenerator, generate
from .titles import extract_title, humanize_filename

__all__ = [
    "CompiledPage",
    "GenerationError",
    "GenerationResult",
    "Manifest",
    "ManifestGenerator",
    "SlugCollisionError",
    "SlugResolver",
    "extract_title",
    "generate",
    "humanize_filename",
]
