"""Processor for formats without dedicated handling."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class PassthroughProcessor:
    """Returns content unchanged; no filtering or cleaning."""

    def filter_paragraphs(self, blocks: Sequence[str]) -> list[str]:
        return list(blocks)

    def clean(self, excerpt: str, body: str) -> str | None:
        if not excerpt.strip():
            return None
        return excerpt
