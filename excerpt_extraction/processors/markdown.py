"""Markdown-specific excerpt processing.

Headings and thematic breaks are not considered paragraphs. Excerpts are
cleaned so they render on their own, away from the rest of the document:
footnotes are removed (their definitions live elsewhere in the body) and
reference-style links are rewritten as inline links.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

_HEADING_OR_RULE: Final[re.Pattern[str]] = re.compile(
    r"\A(?:\#{1,6}\s|-{3,}[ \t]*$|\*{3,}[ \t]*$|_{3,}[ \t]*$)",
    re.MULTILINE,
)
_BLANK_LINES: Final[re.Pattern[str]] = re.compile(r"\n\n+")

# A definition runs on through blank and indented continuation lines.
_FOOTNOTE_DEFINITION: Final[re.Pattern[str]] = re.compile(
    r"^\[\^[^\]]+\]:.*(?:\n(?:[ \t]+.*)?)*",
    re.MULTILINE,
)
_FOOTNOTE_REFERENCE: Final[re.Pattern[str]] = re.compile(r"\[\^[^\]]+\]")
_SPACE_RUN: Final[re.Pattern[str]] = re.compile(r" {2,}")
_NEWLINE_RUN: Final[re.Pattern[str]] = re.compile(r"\n{3,}")

_REFERENCE_LINK: Final[re.Pattern[str]] = re.compile(r"\[([^\]]+)\]\[([^\]]*)\]")
_REFERENCE_DEFINITION: Final[re.Pattern[str]] = re.compile(
    r"""^\[([^\]]+)\]:\s*<?([^\s>]+)>?"""
    r"""(?:\s+["'(]([^"')]+)["')])?[ \t]*$""",
    re.MULTILINE,
)


def is_heading_or_rule(block: str) -> bool:
    """Return True when the first non-blank line is a heading or a rule."""
    return _HEADING_OR_RULE.match(block.lstrip()) is not None


@dataclass(frozen=True)
class MarkdownProcessor:
    """Filters headings/rules and cleans footnotes and reference links."""

    def filter_paragraphs(self, blocks: Sequence[str]) -> list[str]:
        return [block for block in blocks if not is_heading_or_rule(block)]

    def clean(self, excerpt: str, body: str) -> str | None:
        cleaned = _strip_leading_headings(excerpt)
        cleaned = _strip_footnotes(cleaned)
        cleaned = _inline_reference_links(cleaned, body)
        if not cleaned.strip():
            return None
        return cleaned


def _strip_leading_headings(content: str) -> str:
    blocks = _BLANK_LINES.split(content)
    index = 0
    while index < len(blocks) and is_heading_or_rule(blocks[index]):
        index += 1
    return "\n\n".join(blocks[index:]).strip()


def _strip_footnotes(content: str) -> str:
    content = _FOOTNOTE_DEFINITION.sub("", content)
    content = _FOOTNOTE_REFERENCE.sub("", content)
    content = _SPACE_RUN.sub(" ", content)
    content = _NEWLINE_RUN.sub("\n\n", content)
    return content.strip()


def parse_reference_definitions(body: str) -> dict[str, tuple[str, str | None]]:
    """Map lower-cased reference labels to ``(url, title)`` pairs.

    The first definition of a label wins.
    """
    definitions: dict[str, tuple[str, str | None]] = {}
    for match in _REFERENCE_DEFINITION.finditer(body):
        label, url, title = match.groups()
        definitions.setdefault(label.lower(), (url, title))
    return definitions


def _inline_reference_links(content: str, body: str) -> str:
    definitions = parse_reference_definitions(body)

    def _replace(match: re.Match[str]) -> str:
        text, ref = match.groups()
        definition = definitions.get((ref or text).lower())
        if definition is None:
            return text
        url, title = definition
        if title:
            return f'[{text}]({url} "{title}")'
        return f"[{text}]({url})"

    return _REFERENCE_LINK.sub(_replace, content)
