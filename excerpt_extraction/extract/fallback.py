"""Structural excerpt strategies used when a body carries no marker.

The notions of paragraph, sentence and word follow ordinary English usage
and full-stop punctuation; sentence detection is deliberately simple.
"""

from __future__ import annotations

import re
from typing import Final

from excerpt_extraction.processors import FormatProcessor
from excerpt_extraction.types import FallbackConfig, FallbackStrategy

__all__ = [
    "split_sentences",
    "take_paragraphs",
    "take_sentences",
    "take_words",
    "run_fallback",
]

_PARAGRAPH_BREAK: Final[re.Pattern[str]] = re.compile(r"\n\n+")
_CLOSING_QUOTES: Final[str] = "\"'”’»"
_SENTENCE_END: Final[re.Pattern[str]] = re.compile(
    rf"([.!?‽][{_CLOSING_QUOTES}]?)\s+"
)
_TERMINAL: Final[re.Pattern[str]] = re.compile(
    rf"[.!?‽][{_CLOSING_QUOTES}]?\Z"
)


def take_paragraphs(body: str, count: int, processor: FormatProcessor) -> str:
    """Return the first ``count`` paragraph-like blocks joined by a blank line."""
    blocks = processor.filter_paragraphs(_PARAGRAPH_BREAK.split(body))
    return "\n\n".join(blocks[:count]).strip()


def split_sentences(paragraph: str) -> list[str]:
    """Split ``paragraph`` at terminal punctuation followed by a capital."""
    sentences: list[str] = []
    start = 0
    for match in _SENTENCE_END.finditer(paragraph):
        following = paragraph[match.end() : match.end() + 1]
        if not following.isupper():
            continue
        sentences.append(paragraph[start : match.end(1)])
        start = match.end()
    sentences.append(paragraph[start:])
    return sentences


def take_sentences(body: str, count: int, processor: FormatProcessor) -> str:
    paragraph = take_paragraphs(body, 1, processor)
    return " ".join(split_sentences(paragraph)[:count]).strip()


def take_words(
    body: str,
    count: int,
    more: str,
    processor: FormatProcessor,
) -> str:
    """Return up to ``count`` words of the first paragraph.

    ``more`` is appended when the cut lands mid-sentence.
    """
    paragraph = take_paragraphs(body, 1, processor)
    words = paragraph.split()
    if len(words) <= count:
        return paragraph
    truncated = " ".join(words[:count])
    if _TERMINAL.search(truncated):
        return truncated
    return truncated + more


def run_fallback(
    body: str,
    fallback: FallbackConfig,
    processor: FormatProcessor,
) -> str:
    """Return the raw (uncleaned) candidate for the configured strategy."""
    if fallback.strategy is FallbackStrategy.PARAGRAPH:
        return take_paragraphs(body, fallback.count, processor)
    if fallback.strategy is FallbackStrategy.SENTENCE:
        return take_sentences(body, fallback.count, processor)
    return take_words(body, fallback.count, fallback.more, processor)
