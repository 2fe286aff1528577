"""Excerpt extraction over a single document body.

Extraction rules, first success wins:

1. A document that already has an ``excerpt`` key is left unchanged.
2. Text enclosed by the range markers is the excerpt.
3. Text before the split marker (default ``<!--more-->``) is the excerpt.
4. Otherwise the configured fallback strategy derives one from the body.

Candidates are cleaned by the format processor of the document; a candidate
that cleans to nothing falls through to the next rule (except for ranges,
which are always intentional).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from excerpt_extraction.extract.fallback import run_fallback
from excerpt_extraction.processors import FormatProcessor, get_processor
from excerpt_extraction.types import (
    Config,
    ExtractionResult,
    MarkerConfig,
    RangeConfig,
)

__all__ = [
    "apply_excerpt",
    "apply_excerpts",
    "extract",
]

logger = logging.getLogger(__name__)

DEFAULT_FORMAT_FIELD = "format"


def extract(
    body: str,
    config: Config,
    processor: FormatProcessor,
) -> ExtractionResult:
    """Select an excerpt for ``body`` according to ``config``.

    Never raises for any body; a missing marker or an excerpt that cleans to
    nothing degrades to the next rule or to :meth:`ExtractionResult.none`.
    """

    if not config.enabled:
        return ExtractionResult.none()

    if config.range is not None:
        found = _split_range(body, config.range)
        if found is not None:
            raw_excerpt, range_body = found
            excerpt = processor.clean(raw_excerpt, range_body)
            if excerpt is None:
                logger.debug("Range excerpt was empty after cleaning")
                return ExtractionResult.none()
            return ExtractionResult.excerpt_and_body(excerpt, range_body)

    # The fallback never sees the marker, even when it stays in the body.
    source_body = body
    result_body = body
    if config.marker is not None:
        found = _split_marker(body, config.marker)
        if found is not None:
            raw_excerpt, source_body, result_body = found
            excerpt = processor.clean(raw_excerpt, result_body)
            if excerpt is not None:
                return ExtractionResult.excerpt_and_body(excerpt, result_body)
            logger.debug("Marker excerpt was empty after cleaning; falling back")

    if config.fallback is None:
        return ExtractionResult.none()

    candidate = run_fallback(source_body, config.fallback, processor)
    excerpt = processor.clean(candidate, source_body)
    if excerpt is None:
        return ExtractionResult.none()
    if result_body != body:
        return ExtractionResult.excerpt_and_body(excerpt, result_body)
    return ExtractionResult.excerpt_only(excerpt)


def apply_excerpt(
    document: Mapping[str, Any],
    config: Config,
    *,
    format_field: str = DEFAULT_FORMAT_FIELD,
) -> dict[str, Any]:
    """Return a copy of ``document`` with ``excerpt`` (and maybe ``body``) set.

    Any present ``excerpt`` key, including ``""`` and ``None``, is preserved
    and the document is returned unchanged.
    """

    updated = dict(document)
    if "excerpt" in updated:
        return updated
    body = updated.get("body")
    if not isinstance(body, str):
        return updated

    processor = get_processor(updated.get(format_field), config.processors)
    result = extract(body, config, processor)
    if result.excerpt is None:
        return updated
    updated["excerpt"] = result.excerpt
    if result.body is not None:
        updated["body"] = result.body
    return updated


def apply_excerpts(
    documents: Iterable[Mapping[str, Any]],
    config: Config,
    *,
    format_field: str = DEFAULT_FORMAT_FIELD,
) -> list[dict[str, Any]]:
    """Apply :func:`apply_excerpt` to each document, preserving order."""
    return [
        apply_excerpt(document, config, format_field=format_field)
        for document in documents
    ]


def _split_range(body: str, range_config: RangeConfig) -> tuple[str, str] | None:
    start = range_config.start.search(body)
    if start is None:
        return None
    end = range_config.end.search(body, start.end())
    if end is None:
        return None
    excerpt = body[start.end() : end.start()]
    if range_config.remove:
        body = (
            body[: start.start()]
            + body[start.end() : end.start()]
            + body[end.end() :]
        )
    return excerpt, body


def _split_marker(
    body: str, marker: MarkerConfig
) -> tuple[str, str, str] | None:
    """Return the excerpt, the body without the marker and the result body."""
    match = marker.pattern.search(body)
    if match is None:
        return None
    excerpt = body[: match.start()]
    stripped = excerpt + body[match.end() :]
    return excerpt, stripped, stripped if marker.remove else body
