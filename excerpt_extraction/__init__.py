"""
Excerpt extraction package.

Derives short excerpts from document bodies using range markers, a split
marker, or a structural fallback, with per-format cleaning.
"""

from __future__ import annotations

from excerpt_extraction.config import ConfigError, resolve_config
from excerpt_extraction.extract import apply_excerpt, apply_excerpts, extract
from excerpt_extraction.processors import (
    FormatProcessor,
    MarkdownProcessor,
    PassthroughProcessor,
    get_processor,
)
from excerpt_extraction.types import Config, ExtractionResult, FallbackStrategy

__all__: tuple[str, ...] = (
    "Config",
    "ConfigError",
    "ExtractionResult",
    "FallbackStrategy",
    "FormatProcessor",
    "MarkdownProcessor",
    "PassthroughProcessor",
    "apply_excerpt",
    "apply_excerpts",
    "extract",
    "get_processor",
    "resolve_config",
)
