"""Processor registry and passthrough tests."""

from __future__ import annotations

from excerpt_extraction.processors import (
    DEFAULT_PROCESSORS,
    FormatProcessor,
    MarkdownProcessor,
    PassthroughProcessor,
    get_processor,
)


def test_get_processor_exact_match() -> None:
    assert get_processor("md", DEFAULT_PROCESSORS) == MarkdownProcessor()


def test_get_processor_unknown_key_passes_through() -> None:
    assert get_processor("MD", DEFAULT_PROCESSORS) == PassthroughProcessor()
    assert get_processor("html", DEFAULT_PROCESSORS) == PassthroughProcessor()
    assert get_processor(None, DEFAULT_PROCESSORS) == PassthroughProcessor()


def test_builtin_processors_satisfy_protocol() -> None:
    assert isinstance(MarkdownProcessor(), FormatProcessor)
    assert isinstance(PassthroughProcessor(), FormatProcessor)


def test_passthrough_is_identity() -> None:
    processor = PassthroughProcessor()
    blocks = ["# Heading", "---", "Text"]
    assert processor.filter_paragraphs(blocks) == blocks
    assert processor.clean("  Text [^1] [a][b]\n", "") == "  Text [^1] [a][b]\n"


def test_passthrough_blank_is_none() -> None:
    assert PassthroughProcessor().clean(" \n\t", "body") is None
