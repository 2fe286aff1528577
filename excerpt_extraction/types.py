"""Package-wide type definitions."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from excerpt_extraction.processors import FormatProcessor


class FallbackStrategy(str, Enum):
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"
    WORD = "word"


@dataclass(frozen=True)
class RangeConfig:
    """Start/end marker pair whose enclosed text is the excerpt."""

    start: re.Pattern[str]
    end: re.Pattern[str]
    remove: bool = False


@dataclass(frozen=True)
class MarkerConfig:
    """Split marker; everything before the first match is the excerpt."""

    pattern: re.Pattern[str]
    remove: bool = True


@dataclass(frozen=True)
class FallbackConfig:
    """Structural extraction used when no marker is present."""

    strategy: FallbackStrategy
    count: int
    more: str = "…"


class ProcessorTable(Mapping[str, "FormatProcessor"]):
    """Read-only mapping of format keys to processors.

    Hashable, so configs holding one can be shared and used as keys.
    """

    def __init__(
        self,
        items: (
            Mapping[str, FormatProcessor]
            | Iterable[tuple[str, FormatProcessor]]
        ) = (),
    ) -> None:
        self._items: dict[str, FormatProcessor] = dict(items)

    def __getitem__(self, key: str) -> FormatProcessor:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"


def _raw_pattern(pattern: re.Pattern[str]) -> re.Pattern[str] | str:
    # Plain source text only when recompiling it gives the same flags.
    if re.compile(pattern.pattern).flags == pattern.flags:
        return pattern.pattern
    return pattern


@dataclass(frozen=True)
class Config:
    """Resolved, immutable extraction configuration.

    Disabled sections are ``None``. ``diagnostics`` carries advisory warnings
    raised while resolving (for example when every tier is disabled).
    """

    enabled: bool
    range: RangeConfig | None
    marker: MarkerConfig | None
    fallback: FallbackConfig | None
    processors: ProcessorTable = field(default_factory=ProcessorTable)
    diagnostics: tuple[str, ...] = ()

    def to_raw(self) -> dict[str, Any]:
        """Return the canonical raw form accepted by ``resolve_config``."""
        raw_range: dict[str, Any] | bool = False
        if self.range is not None:
            raw_range = {
                "start": _raw_pattern(self.range.start),
                "end": _raw_pattern(self.range.end),
                "remove": self.range.remove,
            }
        raw_marker: dict[str, Any] | bool = False
        if self.marker is not None:
            raw_marker = {
                "pattern": _raw_pattern(self.marker.pattern),
                "remove": self.marker.remove,
            }
        raw_fallback: dict[str, Any] | bool = False
        if self.fallback is not None:
            raw_fallback = {
                "strategy": self.fallback.strategy.value,
                "count": self.fallback.count,
                "more": self.fallback.more,
            }
        return {
            "enabled": self.enabled,
            "range": raw_range,
            "marker": raw_marker,
            "fallback": raw_fallback,
            "processors": dict(self.processors),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of running the engine over one body.

    ``excerpt is None`` means no change. ``body`` is only set when the body
    should be replaced in the output document.
    """

    excerpt: str | None = None
    body: str | None = None

    @classmethod
    def none(cls) -> ExtractionResult:
        return cls()

    @classmethod
    def excerpt_only(cls, excerpt: str) -> ExtractionResult:
        return cls(excerpt=excerpt)

    @classmethod
    def excerpt_and_body(cls, excerpt: str, body: str) -> ExtractionResult:
        return cls(excerpt=excerpt, body=body)

    @property
    def is_none(self) -> bool:
        return self.excerpt is None

    @property
    def kind(self) -> str:
        if self.excerpt is None:
            return "none"
        if self.body is None:
            return "excerpt-only"
        return "excerpt-and-body"
