"""Format-specific excerpt processors and the format-key registry."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from excerpt_extraction.processors.markdown import MarkdownProcessor
from excerpt_extraction.processors.passthrough import PassthroughProcessor
from excerpt_extraction.types import ProcessorTable

__all__ = [
    "DEFAULT_PROCESSORS",
    "FormatProcessor",
    "MarkdownProcessor",
    "PassthroughProcessor",
    "get_processor",
]


@runtime_checkable
class FormatProcessor(Protocol):
    """Filtering and cleaning capabilities for one document format."""

    def filter_paragraphs(self, blocks: Sequence[str]) -> list[str]:
        """Return the paragraph-like blocks, in their original order.

        ``blocks`` is the body already split on blank lines. Used only by
        the fallback strategies.
        """
        ...

    def clean(self, excerpt: str, body: str) -> str | None:
        """Return the cleaned excerpt, or ``None`` if nothing is left.

        ``body`` is the complete document body, available for
        cross-referencing (reference link definitions, for example).
        """
        ...


DEFAULT_PROCESSORS: ProcessorTable = ProcessorTable(
    {
        "md": MarkdownProcessor(),
        "markdown": MarkdownProcessor(),
    }
)

_PASSTHROUGH = PassthroughProcessor()


def get_processor(
    format_key: str | None,
    processors: Mapping[str, FormatProcessor],
) -> FormatProcessor:
    """Look up the processor for ``format_key``; unknown keys pass through."""
    if format_key is None:
        return _PASSTHROUGH
    return processors.get(format_key, _PASSTHROUGH)
