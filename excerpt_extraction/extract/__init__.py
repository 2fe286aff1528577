"""Extraction module public API."""

from __future__ import annotations

from excerpt_extraction.extract.engine import (
    apply_excerpt,
    apply_excerpts,
    extract,
)
from excerpt_extraction.extract.fallback import (
    split_sentences,
    take_paragraphs,
    take_sentences,
    take_words,
)

__all__ = [
    "apply_excerpt",
    "apply_excerpts",
    "extract",
    "split_sentences",
    "take_paragraphs",
    "take_sentences",
    "take_words",
]
