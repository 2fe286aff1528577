"""Resolution of raw excerpt options into an immutable :class:`Config`."""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, Final

from excerpt_extraction.processors import DEFAULT_PROCESSORS, FormatProcessor
from excerpt_extraction.types import (
    Config,
    FallbackConfig,
    FallbackStrategy,
    MarkerConfig,
    ProcessorTable,
    RangeConfig,
)

__all__ = [
    "ALL_TIERS_DISABLED",
    "ConfigError",
    "DEFAULTS",
    "resolve_config",
]

logger = logging.getLogger(__name__)

ALL_TIERS_DISABLED: Final[str] = (
    "Disabled because no extraction method is enabled"
)

DEFAULTS: Final[Mapping[str, Any]] = {
    "enabled": False,
    "range": {
        "start": r"<!--\s*excerpt\s*-->",
        "end": r"<!--\s*/excerpt\s*-->",
        "remove": False,
    },
    "marker": {
        "pattern": r"<!--\s*more\s*-->",
        "remove": True,
    },
    "fallback": {
        "strategy": FallbackStrategy.PARAGRAPH.value,
        "count": None,
        "more": "…",
    },
}

_DEFAULT_COUNTS: Final[Mapping[FallbackStrategy, int]] = {
    FallbackStrategy.PARAGRAPH: 1,
    FallbackStrategy.SENTENCE: 2,
    FallbackStrategy.WORD: 25,
}

_SECTIONS: Final[tuple[str, ...]] = ("range", "marker", "fallback")


class ConfigError(ValueError):
    """Raised when raw excerpt options cannot be resolved."""


def resolve_config(raw: Any = None) -> Config:
    """Validate ``raw`` options and return a resolved :class:`Config`.

    ``raw`` may be a mapping, an iterable of ``(key, value)`` pairs, ``None``
    or an already resolved :class:`Config`. Sections may likewise be given as
    mappings or pairs; ``False`` disables a section while an absent section
    keeps its defaults.

    Raises
    ------
    ConfigError
        If a pattern does not compile, the fallback strategy or count is
        invalid, or a processor cannot be used.
    """

    if isinstance(raw, Config):
        raw = raw.to_raw()
    options = _as_dict(raw, "config")

    sections: dict[str, dict[str, Any] | None] = {}
    for name in _SECTIONS:
        sections[name] = _merge_section(name, options.get(name, True))

    range_config = _resolve_range(sections["range"])
    marker_config = _resolve_marker(sections["marker"])
    fallback_config = _resolve_fallback(sections["fallback"])
    processors = _resolve_processors(options.get("processors"))

    enabled = bool(options.get("enabled", DEFAULTS["enabled"]))
    diagnostics: list[str] = []
    if range_config is None and marker_config is None and fallback_config is None:
        enabled = False
        diagnostics.append(ALL_TIERS_DISABLED)

    logger.debug(
        "Resolved excerpt config enabled=%s range=%s marker=%s fallback=%s",
        enabled,
        range_config is not None,
        marker_config is not None,
        fallback_config is not None,
    )
    return Config(
        enabled=enabled,
        range=range_config,
        marker=marker_config,
        fallback=fallback_config,
        processors=processors,
        diagnostics=tuple(diagnostics),
    )


def _as_dict(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        try:
            return dict(value)
        except (TypeError, ValueError) as exc:
            msg = f"{name} must be a mapping or key/value pairs, got: {value!r}"
            raise ConfigError(msg) from exc
    raise ConfigError(
        f"{name} must be a mapping or key/value pairs, got: {value!r}"
    )


def _merge_section(name: str, value: Any) -> dict[str, Any] | None:
    if value is False or value is None:
        return None
    merged = dict(DEFAULTS[name])
    if value is True:
        return merged
    if isinstance(value, (str, bytes, int, float)):
        raise ConfigError(f"{name} must be a mapping or false, got: {value!r}")
    merged.update(_as_dict(value, name))
    return merged


def _compile_pattern(field: str, value: Any) -> re.Pattern[str]:
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise ConfigError(
            f"{field} must be a valid regular expression, got: {value!r}"
        )
    try:
        return re.compile(value)
    except re.error as exc:
        raise ConfigError(
            f"{field} must be a valid regular expression, got: {value!r}"
        ) from exc


def _resolve_range(section: dict[str, Any] | None) -> RangeConfig | None:
    if section is None:
        return None
    return RangeConfig(
        start=_compile_pattern("range.start", section.get("start")),
        end=_compile_pattern("range.end", section.get("end")),
        remove=bool(section.get("remove")),
    )


def _resolve_marker(section: dict[str, Any] | None) -> MarkerConfig | None:
    if section is None:
        return None
    return MarkerConfig(
        pattern=_compile_pattern("marker.pattern", section.get("pattern")),
        remove=bool(section.get("remove")),
    )


def _resolve_fallback(section: dict[str, Any] | None) -> FallbackConfig | None:
    if section is None:
        return None

    raw_strategy = section.get("strategy")
    try:
        strategy = FallbackStrategy(raw_strategy)
    except ValueError as exc:
        raise ConfigError(
            "fallback.strategy must be one of 'paragraph', 'sentence', "
            f"or 'word', got: {raw_strategy!r}"
        ) from exc

    count = section.get("count")
    if count is None:
        count = _DEFAULT_COUNTS[strategy]
    elif isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ConfigError(
            f"fallback.count must be a positive integer, got: {count!r}"
        )

    more = section.get("more")
    if more is None:
        more = ""
    elif not isinstance(more, str):
        raise ConfigError(f"fallback.more must be a string, got: {more!r}")

    return FallbackConfig(strategy=strategy, count=count, more=more)


def _resolve_processors(value: Any) -> ProcessorTable:
    processors: dict[str, FormatProcessor] = dict(DEFAULT_PROCESSORS)
    if value is None or value is False:
        return ProcessorTable(processors)
    for key, candidate in _as_dict(value, "processors").items():
        if not isinstance(key, str) or not key:
            raise ConfigError(
                f"processors keys must be non-empty strings, got: {key!r}"
            )
        processors[key] = _load_processor(key, candidate)
    return ProcessorTable(processors)


def _load_processor(key: str, candidate: Any) -> FormatProcessor:
    if isinstance(candidate, str):
        candidate = _import_reference(key, candidate)
    if isinstance(candidate, type):
        try:
            candidate = candidate()
        except TypeError as exc:
            raise ConfigError(
                f"processors.{key} could not be instantiated: {exc}"
            ) from exc
    if not isinstance(candidate, FormatProcessor):
        raise ConfigError(
            f"processors.{key} must provide filter_paragraphs and clean, "
            f"got: {candidate!r}"
        )
    return candidate


def _import_reference(key: str, reference: str) -> Any:
    module_name, _, attribute = reference.partition(":")
    module_name = module_name.strip()
    attribute = attribute.strip()
    if not module_name or not attribute:
        raise ConfigError(
            f"processors.{key} must be a 'module:attribute' reference, "
            f"got: {reference!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(
            f"processors.{key} module could not be imported: {module_name!r}"
        ) from exc
    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise ConfigError(
            f"processors.{key} attribute not found: {reference!r}"
        ) from exc
