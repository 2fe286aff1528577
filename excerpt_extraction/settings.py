"""Application configuration loading."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import yaml
from dotenv import load_dotenv

from excerpt_extraction.config import ConfigError, resolve_config
from excerpt_extraction.types import Config

logger = logging.getLogger(__name__)

_DEFAULT_WORKERS: Final[int] = 1
_DEFAULT_FORMAT_FIELD: Final[str] = "format"
_CONFIG_ROOT_KEY: Final[str] = "excerpt"

_CACHED_SETTINGS: Settings | None = None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration derived from environment variables."""

    config_path: Path | None
    enabled: bool | None
    workers: int
    format_field: str


_TRUE_VALUES: Final[set[str]] = {"1", "true", "yes", "on"}
_FALSE_VALUES: Final[set[str]] = {"0", "false", "no", "off"}


def _coerce_bool(value: str | None, *, default: bool | None) -> bool | None:
    """Convert common textual boolean representations to bool."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def get_settings(*, force_reload: bool = False) -> Settings:
    """Load configuration, optionally reloading from the environment."""
    global _CACHED_SETTINGS  # noqa: PLW0603
    if not force_reload and _CACHED_SETTINGS is not None:
        return _CACHED_SETTINGS

    dotenv_override = os.getenv("EXCERPT_DOTENV_PATH")
    if dotenv_override:
        load_dotenv(dotenv_override, override=True)
    else:
        dotenv_path = Path.cwd() / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path=dotenv_path)

    config_path_raw = os.getenv("EXCERPT_CONFIG_PATH")
    config_path = (
        Path(config_path_raw).expanduser().resolve()
        if config_path_raw and config_path_raw.strip()
        else None
    )
    enabled = _coerce_bool(os.getenv("EXCERPT_ENABLED"), default=None)

    workers_raw = os.getenv("EXCERPT_WORKERS")
    if workers_raw is None or not workers_raw.strip():
        workers = _DEFAULT_WORKERS
    else:
        try:
            workers = max(int(workers_raw), 0)
        except ValueError as exc:
            raise RuntimeError(
                f"EXCERPT_WORKERS must be an integer, got: {workers_raw!r}"
            ) from exc

    format_field = (
        os.getenv("EXCERPT_FORMAT_FIELD", "").strip() or _DEFAULT_FORMAT_FIELD
    )

    _CACHED_SETTINGS = Settings(
        config_path=config_path,
        enabled=enabled,
        workers=workers,
        format_field=format_field,
    )
    return _CACHED_SETTINGS


def load_raw_config(settings: Settings) -> dict[str, Any]:
    """Return raw excerpt options from the YAML file and environment.

    A top-level ``excerpt:`` key in the file is unwrapped, so the options may
    live in a shared site configuration file.
    """

    raw: dict[str, Any] = {}
    if settings.config_path is not None:
        try:
            with settings.config_path.open(encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle)
        except OSError as exc:
            raise ConfigError(
                f"Config file could not be read: {settings.config_path}"
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigError(
                f"Config file is not valid YAML: {settings.config_path}"
            ) from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, Mapping):
            raise ConfigError(
                f"Config file must contain a mapping: {settings.config_path}"
            )
        if isinstance(loaded.get(_CONFIG_ROOT_KEY), Mapping):
            loaded = loaded[_CONFIG_ROOT_KEY]
        raw.update(loaded)

    if settings.enabled is not None:
        raw["enabled"] = settings.enabled
    return raw


def load_config(
    settings: Settings | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Resolve the excerpt :class:`Config` described by ``settings``.

    Diagnostics raised during resolution are logged as warnings.
    """

    cfg = settings or get_settings()
    raw = load_raw_config(cfg)
    if overrides:
        raw.update(overrides)
    config = resolve_config(raw)
    for diagnostic in config.diagnostics:
        logger.warning("[excerpt] %s", diagnostic)
    return config
